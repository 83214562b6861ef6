from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from ..services.config.configuration_loader import parse_configuration, serialize_configuration
from ..services.stamping.stamp_orchestrator import (
    StampOrchestrator,
    StampResult,
    create_document,
    modify_document,
)
from ..utils.exceptions import StampError, StorageErrorCode
from ..utils.logging import get_logger

bp = Blueprint("documents", __name__, url_prefix="/documents")
logger = get_logger(__name__)

_STATUS_BY_REASON = {
    StorageErrorCode.ENOENT: HTTPStatus.NOT_FOUND,
    StorageErrorCode.EACCES: HTTPStatus.FORBIDDEN,
    StorageErrorCode.EPIPE: HTTPStatus.BAD_GATEWAY,
    StorageErrorCode.EEXIST: HTTPStatus.CONFLICT,
    StorageErrorCode.UNKNOWN: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def init_app(api_bp: Blueprint) -> None:
    api_bp.register_blueprint(bp)


def _orchestrator() -> StampOrchestrator:
    return StampOrchestrator.from_config(current_app.config)


def _respond(result: StampResult):
    if result.ok:
        return jsonify(result.to_dict())
    return jsonify(result.to_dict()), _STATUS_BY_REASON[result.reason]


def _invalid(error: StampError):
    logger.warning("stamp request rejected", error=str(error), error_type=type(error).__name__)
    return (
        jsonify({"status": "error", "reason": "invalid_request", "message": str(error)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@bp.get("/config")
def get_config():
    configuration = _orchestrator().loader.load_configuration()
    return jsonify(serialize_configuration(configuration))


@bp.post("/modify")
def modify():
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"error": "JSON configuration body is required"}), HTTPStatus.BAD_REQUEST

    try:
        configuration = parse_configuration(payload)
        result = modify_document(configuration, _orchestrator())
    except StampError as exc:
        return _invalid(exc)
    return _respond(result)


@bp.post("/create")
def create():
    payload = request.get_json(silent=True)

    try:
        configuration = parse_configuration(payload) if payload else None
        result = create_document(configuration, _orchestrator())
    except StampError as exc:
        return _invalid(exc)
    return _respond(result)
