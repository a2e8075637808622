# pethub/core/config.py

import os


def _env_flag(name: str, default: bool = True) -> bool:
    """Reads an on/off environment variable ('1', 'true', 'yes', 'on')."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Settings shared by every environment."""
    # Signs and verifies the access tokens issued by the auth service.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # Thread pool size used to run the four dimension scorers concurrently.
    STATUS_SCORING_WORKERS = int(os.getenv('STATUS_SCORING_WORKERS', '4'))
    # Caller-side timeout around one whole status calculation.
    STATUS_COMPUTE_TIMEOUT_SECONDS = float(os.getenv('STATUS_COMPUTE_TIMEOUT_SECONDS', '10'))

    # Optional collections. Disabled ones are treated as empty without a query.
    ADVENTURE_LOGS_ENABLED = _env_flag('ADVENTURE_LOGS_ENABLED')
    SERVICE_BOOKINGS_ENABLED = _env_flag('SERVICE_BOOKINGS_ENABLED')


class DevelopmentConfig(Config):
    """Local development: debug mode and the dev Firebase project."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """Test runs. Firestore is replaced by an injected repository."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or 'test-secret-key'
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')


# Maps FLASK_ENV values to config classes; create_app picks one from here.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
