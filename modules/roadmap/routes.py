# modules/roadmap/routes.py
import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from modules.careers.helpers import get_current_roadmap
from modules.common.http import api_error, json_body
from modules.common.progress import toggle_roadmap_step

log = logging.getLogger(__name__)

roadmap_bp = Blueprint("roadmap", __name__)


@roadmap_bp.route("/roadmaps/current", methods=["GET"])
@login_required
def current():
    roadmap = get_current_roadmap(current_user.id)
    return jsonify({"ok": True, "roadmap": roadmap.to_dict() if roadmap else None})


@roadmap_bp.route("/roadmap-steps/<int:step_id>", methods=["PATCH"])
@login_required
def update_step(step_id: int):
    payload = json_body()
    flag = payload.get("isCompleted")
    # bool only: 0/1 and "true" are rejected
    if not isinstance(flag, bool):
        return api_error("isCompleted must be a boolean", 400)

    try:
        step = toggle_roadmap_step(current_user.id, step_id, flag)
    except Exception as e:
        log.exception("Roadmap step update failed user=%s step=%s", current_user.id, step_id)
        return api_error("Failed to update roadmap step", 500, e)

    if step is None:
        return api_error("Roadmap step not found", 404)
    return jsonify({"ok": True, "step": step.to_dict()})
