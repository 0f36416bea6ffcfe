from marshmallow import Schema, fields, pre_load, validates, ValidationError


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class UserCreateSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if not value:
            raise ValidationError("Password is required.")


class UserUpdateSchema(UserCreateSchema):
    pass


class UserLoginSchema(Schema):
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    is_chirpy_red = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
