# modules/dashboard/routes.py
import logging

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from modules.common.http import api_error
from modules.common.profile_loader import load_profile_snapshot
from modules.common.progress import compute_dashboard_stats

log = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/stats", methods=["GET"])
@login_required
def stats():
    try:
        data = compute_dashboard_stats(current_user.id)
        snap = load_profile_snapshot(current_user)
    except Exception as e:
        log.exception("Dashboard stats failed for user %s", current_user.id)
        return api_error("Failed to load dashboard stats", 500, e)

    data["profileStrength"] = snap["profile_strength_score"]
    data["missingSections"] = snap["missing_sections"]
    return jsonify({"ok": True, **data})
