"""
Authentication blueprint:
- POST /auth/signup
- POST /auth/login
- POST /auth/refresh-token

Access tokens are JWTs signed with the server secret (1 hour). Refresh tokens
are JWTs signed with a per-user secret stored in the tokens table (30 days);
the business rules live in services.auth_service.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.auth import LoginPayloadSchema, RefreshTokenSchema, UserLoginSchema
from models.schemas.user import UserCreateSchema, UserOutSchema
from services import auth_service

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema(only=("id", "email", "first_name", "last_name"))
user_login_schema = UserLoginSchema()
refresh_token_schema = RefreshTokenSchema()
login_payload_schema = LoginPayloadSchema()


@bp.post("/signup")
def signup():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [firstName, lastName, email, password]
          properties:
            firstName: { type: string, example: John }
            lastName: { type: string, example: Doe }
            email: { type: string, example: john.doe@example.com }
            password: { type: string, example: Password123! }
    responses:
      201:
        description: Created
      400:
        description: User already exists or could not be created
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    user = auth_service.sign_up(**data)

    return jsonify(
        {
            "data": user_out_schema.dump(user)
        }
    ), 201


@bp.post("/login")
def login():
    """
    Login: returns the user with an access token and a refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns user and tokens)
      400:
        description: Password or email incorrect (wrong password)
      404:
        description: Password or email incorrect (unknown email)
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    result = auth_service.login(data["email"], data["password"])

    return jsonify(login_payload_schema.dump(result)), 200


@bp.post("/refresh-token")
def refresh_token():
    """
    Exchange a refresh token for a new access/refresh pair
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns user and tokens)
      401:
        description: Invalid, expired or unknown refresh token
      404:
        description: User not found
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_token_schema.load(payload)

    result = auth_service.token_refresh(data["refresh_token"])

    return jsonify(login_payload_schema.dump(result)), 200
