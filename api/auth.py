"""
Authentication blueprint:
- POST /login    email + password -> access token + refresh token
- POST /refresh  Authorization: Bearer <refresh token> -> new access token
- POST /revoke   Authorization: Bearer <refresh token> -> 204

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues one-hour access tokens (JWTs signed with HS256)
- Issues opaque 60-day refresh tokens stored in the DB so they can be revoked
- Refresh does not rotate the refresh token; revoke is idempotent
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import UserLoginSchema, UserOutSchema
from utils.credentials import get_bearer_token
from utils.decorators import no_body
from utils.exceptions import CredentialError, Unauthorized
from utils.sessions import get_session_manager

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()


def _refresh_token_from_header() -> str:
    try:
        return get_bearer_token(request.headers)
    except CredentialError as exc:
        raise Unauthorized() from exc


@bp.post("/login")
def login():
    """
    Login: returns the user plus token and refresh_token
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
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    result = get_session_manager().login(data["email"], data["password"])

    body = user_out_schema.dump(result.user)
    body["token"] = result.access_token
    body["refresh_token"] = result.refresh_token
    return jsonify(body), 200


@bp.post("/refresh")
@no_body()
def refresh():
    """
    Use a refresh token to obtain a new access token (no rotation)
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns token)
      401:
        description: Unknown, revoked or expired refresh token
    """
    token = _refresh_token_from_header()
    access_token = get_session_manager().refresh(token)
    return jsonify({"token": access_token}), 200


@bp.post("/revoke")
@no_body()
def revoke():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: Revoked (or already revoked / unknown)
      401:
        description: Missing Authorization header
    """
    token = _refresh_token_from_header()
    get_session_manager().revoke(token)
    return ("", 204)
