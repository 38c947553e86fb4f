import re

from marshmallow import Schema, fields, pre_load, validates, validate, ValidationError


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class UserCreateSchema(Schema):
    first_name = fields.String(required=True, data_key="firstName", validate=validate.Length(min=1, max=50))
    last_name = fields.String(required=True, data_key="lastName", validate=validate.Length(min=1, max=50))
    email = fields.Email(required=True, validate=validate.Length(max=50))
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        # Email is stored as given (lookups are case-sensitive), only surrounding spaces go
        if isinstance(data, dict):
            data = dict(data)
            for key in ("firstName", "lastName", "email"):
                if key in data:
                    data[key] = _strip(data[key])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")
        if not re.search(r"[A-Za-z]", value) or not re.search(r"\d", value):
            raise ValidationError("Password must contain at least one letter and one digit.")


class UserOutSchema(Schema):
    id = fields.Integer()
    email = fields.String()
    first_name = fields.String(data_key="firstName")
    last_name = fields.String(data_key="lastName")
    created_at = fields.String(data_key="createdAt", allow_none=True)
    updated_at = fields.String(data_key="updatedAt", allow_none=True)
