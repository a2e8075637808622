# pethub/api/pet_status/test_routes.py
"""
HTTP tests for /api/pets/<pet_id>/status.

Usage: python -m pytest pethub/api/pet_status/test_routes.py -v
"""

import pytest
from flask_jwt_extended import create_access_token

from pethub import create_app
from pethub.conftest import FakeRecordRepository, healthy_records
from pethub.core.exceptions import RecordSourceError


def _client(repository):
    app = create_app('testing', record_repository=repository)
    with app.app_context():
        token = create_access_token(identity='user-1')
    return app.test_client(), {'Authorization': f'Bearer {token}'}


@pytest.fixture
def healthy_client():
    return _client(FakeRecordRepository(**healthy_records()))


def test_status_response_shape(healthy_client):
    client, headers = healthy_client
    response = client.get('/api/pets/pet-1/status?as_of=2024-06-15', headers=headers)

    assert response.status_code == 200
    body = response.get_json()
    assert body['pet_id'] == 'pet-1'
    assert set(body['status']) == {'health', 'nutrition', 'energy', 'hygiene', 'wellbeing'}

    health = body['status']['health']
    assert health['value'] == 100
    assert health['status'] == 'excellent'
    assert health['lastUpdate'] == '2024-06-10'
    assert health['daysSinceLastUpdate'] == 5

    assert body['recommendations'] == []
    assert body['mood']['text'] == 'Feliz y saludable'
    assert 'calculated_at' in body


def test_status_for_pet_without_records():
    client, headers = _client(FakeRecordRepository())
    body = client.get('/api/pets/pet-1/status?as_of=2024-06-15', headers=headers).get_json()

    wellbeing = body['status']['wellbeing']
    assert (wellbeing['value'], wellbeing['status']) == (28, 'critical')
    assert wellbeing['lastUpdate'] is None
    assert [r['type'] for r in body['recommendations']] == ['health', 'nutrition', 'energy', 'hygiene']
    assert body['recommendations'][0]['marketplaceLink'] == '/marketplace?category=veterinaria'
    assert body['recommendations'][0]['priority'] == 'high'


def test_recommendations_endpoint():
    client, headers = _client(FakeRecordRepository())
    response = client.get('/api/pets/pet-1/status/recommendations?as_of=2024-06-15', headers=headers)

    assert response.status_code == 200
    body = response.get_json()
    assert set(body) == {'pet_id', 'recommendations'}
    assert len(body['recommendations']) == 4


def test_status_without_as_of_uses_today(healthy_client):
    client, headers = healthy_client
    response = client.get('/api/pets/pet-1/status', headers=headers)
    assert response.status_code == 200


def test_status_requires_token(healthy_client):
    client, _ = healthy_client
    assert client.get('/api/pets/pet-1/status').status_code == 401


def test_status_of_someone_elses_pet():
    client, headers = _client(FakeRecordRepository(owner_id='user-2'))
    response = client.get('/api/pets/pet-1/status', headers=headers)

    assert response.status_code == 403
    assert response.get_json()['error_code'] == 'FORBIDDEN'


def test_status_of_unknown_pet():
    client, headers = _client(FakeRecordRepository(owner_id=None))
    response = client.get('/api/pets/ghost/status', headers=headers)

    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'PET_NOT_FOUND'


def test_status_when_a_collection_cannot_be_read():
    repo = FakeRecordRepository(failures={'fetch_health_events': RecordSourceError('veterinary_sessions')})
    client, headers = _client(repo)
    response = client.get('/api/pets/pet-1/status', headers=headers)

    assert response.status_code == 502
    assert response.get_json()['error_code'] == 'RECORD_SOURCE_UNAVAILABLE'


@pytest.mark.parametrize('as_of', ['not-a-date', '2024-13-01', '2999-01-01'])
def test_status_rejects_bad_as_of(healthy_client, as_of):
    client, headers = healthy_client
    response = client.get(f'/api/pets/pet-1/status?as_of={as_of}', headers=headers)

    assert response.status_code == 400
    body = response.get_json()
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert 'as_of' in body['details']
