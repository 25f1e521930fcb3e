from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from .logging import get_logger

log = get_logger(__name__)


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def register_error_handlers(app: Flask) -> None:
    """Map domain errors to JSON responses for every controller."""

    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return (
            jsonify(
                {
                    "success": False,
                    "message": str(e),
                    "errors": [{"field": err.field, "message": err.message} for err in e.errors],
                }
            ),
            400,
        )

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"success": False, "message": str(e)}), 404

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return jsonify({"success": False, "message": str(e)}), 409

    @app.errorhandler(StorageError)
    def _storage_error(e: StorageError):
        log.warning("http.storage_error", path=request.path, error=str(e))
        return jsonify({"success": False, "message": str(e), "retryable": True}), 503
