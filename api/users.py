"""
Users blueprint:
- POST /users   register
- PUT  /users   update own email/password (bearer access token)
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g, abort

from models import storage
from models.user import User
from models.schemas.user import UserCreateSchema, UserUpdateSchema, UserOutSchema
from utils.decorators import jwt_required
from utils.exceptions import Unauthorized
from utils.security import hash_password

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()


def _email_taken(email: str, exclude_id: str | None = None) -> bool:
    existing = storage.get_user_by_email(email)
    return existing is not None and existing.id != exclude_id


@bp.post("/users")
def create_user():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    if _email_taken(data["email"]):
        abort(409, description="Email already registered")

    user = User(
        email=data["email"],
        hashed_password=hash_password(data["password"]),
        is_chirpy_red=False,
    )
    storage.new(user)
    storage.save()

    return jsonify(user_out_schema.dump(user)), 201


@bp.put("/users")
@jwt_required()
def update_user():
    """
    Update the authenticated user's email and password.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    user = storage.get(User, g.current_user_id)
    if user is None:
        # token outlived its user (e.g. after /admin/reset)
        raise Unauthorized()

    if _email_taken(data["email"], exclude_id=user.id):
        abort(409, description="Email already registered")

    user.email = data["email"]
    user.hashed_password = hash_password(data["password"])
    storage.new(user)
    storage.save()

    return jsonify(user_out_schema.dump(user)), 200
