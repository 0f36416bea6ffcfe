from __future__ import annotations

import uuid
from typing import Optional

from flask import Blueprint, request, jsonify, g, abort

from models import storage
from models.chirp import Chirp
from models.schemas.chirp import ChirpCreateSchema, ChirpOutSchema
from utils.decorators import jwt_required
from utils.exceptions import Forbidden
from utils.profanity import clean_profanity

bp = Blueprint("chirps", __name__)

chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()
chirps_out_schema = ChirpOutSchema(many=True)

SORT_DIRECTIONS = {
    "asc": Chirp.created_at.asc(),
    "desc": Chirp.created_at.desc(),
}


def _parse_uuid(value: str) -> Optional[str]:
    try:
        return str(uuid.UUID(value))
    except (ValueError, TypeError):
        return None


def _get_chirp_or_404(chirp_id: str) -> Chirp:
    canonical = _parse_uuid(chirp_id)
    chirp = storage.get(Chirp, canonical) if canonical else None
    if chirp is None:
        abort(404, description="Chirp not found")
    return chirp


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Post a chirp as the authenticated user
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            body: { type: string, maxLength: 140 }
    responses:
      201: { description: Created }
      400: { description: Chirp is too long }
      401: { description: Unauthorized }
    """
    payload = request.get_json(silent=True) or {}
    data = chirp_create_schema.load(payload)

    chirp = Chirp(body=clean_profanity(data["body"]), user_id=g.current_user_id)
    storage.new(chirp)
    storage.save()

    return jsonify(chirp_out_schema.dump(chirp)), 201


@bp.get("/chirps")
def list_chirps():
    """
    List chirps, optionally by author
    ---
    tags:
      - Chirps
    parameters:
      - in: query
        name: author_id
        type: string
      - in: query
        name: sort
        type: string
        enum: [asc, desc]
    responses:
      200: { description: OK }
      400: { description: Invalid query parameter }
    """
    sort = request.args.get("sort") or "asc"
    order_by = SORT_DIRECTIONS.get(sort)
    if order_by is None:
        abort(400, description="Invalid sort parameter")

    query = storage.get_session().query(Chirp)

    author_id = request.args.get("author_id")
    if author_id:
        canonical = _parse_uuid(author_id)
        if canonical is None:
            abort(400, description="Invalid author_id")
        query = query.filter(Chirp.user_id == canonical)

    rows = query.order_by(order_by).all()
    return jsonify(chirps_out_schema.dump(rows)), 200


@bp.get("/chirps/<chirp_id>")
def get_chirp(chirp_id: str):
    chirp = _get_chirp_or_404(chirp_id)
    return jsonify(chirp_out_schema.dump(chirp)), 200


@bp.delete("/chirps/<chirp_id>")
@jwt_required()
def delete_chirp(chirp_id: str):
    """
    Delete one of your own chirps
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    responses:
      204: { description: Deleted }
      403: { description: Not the author }
      404: { description: Not found }
    """
    chirp = _get_chirp_or_404(chirp_id)
    if chirp.user_id != g.current_user_id:
        raise Forbidden("You are not allowed to delete this chirp")

    storage.delete(chirp)
    storage.save()
    return ("", 204)
