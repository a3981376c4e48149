# modules/careers/routes.py
from __future__ import annotations

import logging

from flask import jsonify
from flask_login import current_user, login_required

from modules.common.ai import generate_career_recommendations
from modules.common.http import api_error
from modules.common.profile_loader import load_profile_snapshot, load_user_skills

from . import bp
from .helpers import list_career_paths, replace_career_paths, select_and_regenerate

log = logging.getLogger(__name__)


@bp.route("", methods=["GET"], endpoint="list")
@login_required
def list_paths():
    paths = list_career_paths(current_user.id)
    return jsonify({"ok": True, "careerPaths": [p.to_dict() for p in paths]})


@bp.route("/generate", methods=["POST"], endpoint="generate")
@login_required
def generate():
    """
    Replace the user's career paths with a fresh set of recommendations.
    Falls back to keyword matching when the model is unavailable.
    """
    skills = load_user_skills(current_user.id)
    if not skills:
        return api_error("Please add skills first", 400)

    try:
        profile = load_profile_snapshot(current_user)
        recs, used_live_ai = generate_career_recommendations(
            skills, profile, return_source=True
        )
        paths = replace_career_paths(current_user.id, recs)

        log.info(
            "Careers generated user=%s skills=%d paths=%d used_live_ai=%s",
            current_user.id,
            len(skills),
            len(paths),
            used_live_ai,
        )
        return jsonify(
            {
                "ok": True,
                "careerPaths": [p.to_dict() for p in paths],
                "usedLiveAi": used_live_ai,
            }
        )
    except Exception as e:
        log.exception("Career generation failed for user %s", current_user.id)
        return api_error("Failed to generate career recommendations", 500, e)


@bp.route("/<int:career_path_id>/select", methods=["POST"], endpoint="select")
@login_required
def select(career_path_id: int):
    try:
        roadmap = select_and_regenerate(current_user.id, career_path_id)
    except Exception as e:
        log.exception(
            "Career selection failed user=%s career_path=%s",
            current_user.id,
            career_path_id,
        )
        return api_error("Failed to select career path", 500, e)

    if roadmap is None:
        return api_error("Career path not found", 404)

    return jsonify(
        {
            "ok": True,
            "message": "Career path selected and roadmap generated",
            "roadmap": roadmap.to_dict(),
        }
    )
