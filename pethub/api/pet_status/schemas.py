# pethub/api/pet_status/schemas.py
from marshmallow import Schema, fields, validates, ValidationError

from pethub.models.pet_status import Priority, StatusDimension, StatusLevel
from pethub.utils.datetime_utils import DateTimeUtils


class StatusQuerySchema(Schema):
    """
    Query parameters of GET /api/pets/<pet_id>/status.
    as_of pins the reference day, which makes the result reproducible.
    """
    as_of = fields.Date(format="%Y-%m-%d", load_default=None)

    @validates('as_of')
    def validate_as_of(self, value, **kwargs):
        if value is not None and value > DateTimeUtils.today():
            raise ValidationError("'as_of' cannot be in the future.")


class StatusBarSchema(Schema):
    """One status bar. Field names follow the frontend's StatusBar type."""
    value = fields.Int()
    status = fields.Enum(StatusLevel, by_value=True)
    label = fields.Str()
    message = fields.Str()
    last_update = fields.Date(format="%Y-%m-%d", data_key='lastUpdate', allow_none=True)
    days_since_last_update = fields.Int(data_key='daysSinceLastUpdate', allow_none=True)


class PetStatusSchema(Schema):
    health = fields.Nested(StatusBarSchema)
    nutrition = fields.Nested(StatusBarSchema)
    energy = fields.Nested(StatusBarSchema)
    hygiene = fields.Nested(StatusBarSchema)
    wellbeing = fields.Nested(StatusBarSchema)


class StatusRecommendationSchema(Schema):
    type = fields.Enum(StatusDimension, by_value=True)
    message = fields.Str()
    action = fields.Str()
    marketplace_link = fields.Str(data_key='marketplaceLink', allow_none=True)
    priority = fields.Enum(Priority, by_value=True)


class PetMoodSchema(Schema):
    average = fields.Float()
    text = fields.Str()
    emoji = fields.Str()


class PetStatusReportSchema(Schema):
    """Response of GET /api/pets/<pet_id>/status."""
    pet_id = fields.Str()
    status = fields.Nested(PetStatusSchema)
    recommendations = fields.List(fields.Nested(StatusRecommendationSchema), dump_default=[])
    mood = fields.Nested(PetMoodSchema)
    calculated_at = fields.DateTime()


class RecommendationsResponseSchema(Schema):
    """Response of GET /api/pets/<pet_id>/status/recommendations."""
    pet_id = fields.Str()
    recommendations = fields.List(fields.Nested(StatusRecommendationSchema), dump_default=[])
