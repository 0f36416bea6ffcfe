from marshmallow import Schema, fields, validates, ValidationError

from models.chirp import MAX_CHIRP_LENGTH


class ChirpCreateSchema(Schema):
    body = fields.String(required=True)

    @validates("body")
    def validate_body(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Chirp body is required.")
        if len(value) > MAX_CHIRP_LENGTH:
            raise ValidationError("Chirp is too long")


class ChirpOutSchema(Schema):
    id = fields.String(dump_only=True)
    body = fields.String()
    user_id = fields.String()
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)
