"""
Static file server and admin metrics:
- GET  /app/<path>      serve files from STATIC_DIR, counting each hit
- GET  /admin/metrics   HTML page with the hit count
- POST /admin/reset     dev only: delete all users and zero the counter
"""
from __future__ import annotations

import logging
import os

from flask import Blueprint, abort, current_app, render_template, send_from_directory

from models import storage
from utils.exceptions import Forbidden
from utils.metrics import hits

logger = logging.getLogger(__name__)

bp = Blueprint("admin", __name__)

# never served, even if someone points STATIC_DIR at the project root
DATABASE_SUFFIXES = (".db", ".sqlite", ".sqlite3", ".db-journal", ".db-wal", ".db-shm")


def _is_hidden(path: str) -> bool:
    parts = path.replace("\\", "/").split("/")
    if any(part.startswith(".") for part in parts if part):
        return True
    return path.lower().endswith(DATABASE_SUFFIXES)


@bp.get("/app/", defaults={"path": "index.html"})
@bp.get("/app/<path:path>")
def fileserver(path: str):
    hits.increment()
    if _is_hidden(path):
        abort(404)
    static_dir = os.path.abspath(current_app.config["STATIC_DIR"])
    return send_from_directory(static_dir, path)


@bp.get("/admin/metrics")
def metrics():
    """
    Hit counter
    ---
    tags:
      - Admin
    produces:
      - text/html
    responses:
      200: { description: HTML page }
    """
    html = render_template("metrics.html", count=hits.load())
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}


@bp.post("/admin/reset")
def reset():
    """
    Delete every user and reset the hit counter (PLATFORM=dev only)
    ---
    tags:
      - Admin
    responses:
      200: { description: Reset }
      403: { description: Not a dev platform }
    """
    if current_app.config.get("PLATFORM") != "dev":
        raise Forbidden("Reset is only allowed in dev environment")

    deleted = storage.delete_all_users()
    hits.store(0)
    logger.warning("admin reset: %d users deleted", deleted)
    return {"deleted_users": deleted}, 200
