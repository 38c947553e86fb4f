from marshmallow import Schema, fields, validate

from models.schemas.user import UserOutSchema


class UserLoginSchema(Schema):
    email = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(required=True, data_key="refreshToken", validate=validate.Length(min=1))


class TokenPayloadSchema(Schema):
    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")
    expires_in = fields.Integer(data_key="expiresIn")
    refresh_expires_in = fields.Integer(data_key="refreshExpiresIn")


class LoginPayloadSchema(Schema):
    user = fields.Nested(UserOutSchema)
    token = fields.Nested(TokenPayloadSchema)
    status = fields.Integer()
