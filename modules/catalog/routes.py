# modules/catalog/routes.py
"""
Static course / project catalog plus the user's saved items.

Saving the same item twice returns the existing pairing; the (user, item)
unique constraint backs that up if two requests race.
"""
import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy.exc import IntegrityError

from models import Course, Project, SavedCourse, SavedProject, db
from modules.common.http import api_error, json_body
from modules.common.progress import toggle_saved_project

log = logging.getLogger(__name__)

catalog_bp = Blueprint("catalog", __name__)


def _int_field(payload: dict, key: str):
    val = payload.get(key)
    if isinstance(val, bool):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None


# ---------------------------
# Catalog
# ---------------------------

def _matches(item, needle: str) -> bool:
    """Case-insensitive search over title, description and skills."""
    if not needle:
        return True
    hay = [item.title or "", item.description or ""] + list(item.skills or [])
    return any(needle in h.lower() for h in hay)


@catalog_bp.route("/courses", methods=["GET"])
def courses():
    q = Course.query
    level = (request.args.get("level") or "").strip()
    if level and level != "all":
        q = q.filter(Course.level == level)
    price = (request.args.get("price") or "").strip().lower()
    if price == "free":
        q = q.filter(Course.is_free.is_(True))
    elif price == "paid":
        q = q.filter(Course.is_free.is_(False))

    needle = (request.args.get("q") or "").strip().lower()
    rows = [c for c in q.order_by(Course.id).all() if _matches(c, needle)]
    return jsonify({"ok": True, "courses": [c.to_dict() for c in rows]})


@catalog_bp.route("/projects", methods=["GET"])
def projects():
    q = Project.query
    phase = (request.args.get("phase") or "").strip()
    if phase and phase != "all":
        q = q.filter(Project.phase == phase)
    difficulty = (request.args.get("difficulty") or "").strip()
    if difficulty and difficulty != "all":
        q = q.filter(Project.difficulty == difficulty)

    needle = (request.args.get("q") or "").strip().lower()
    rows = [p for p in q.order_by(Project.id).all() if _matches(p, needle)]
    return jsonify({"ok": True, "projects": [p.to_dict() for p in rows]})


# ---------------------------
# Saved courses
# ---------------------------

@catalog_bp.route("/saved-courses", methods=["GET"])
@login_required
def saved_courses():
    rows = (
        SavedCourse.query.filter_by(user_id=current_user.id)
        .order_by(SavedCourse.created_at.desc(), SavedCourse.id.desc())
        .all()
    )
    return jsonify({"ok": True, "savedCourses": [r.to_dict() for r in rows]})


@catalog_bp.route("/saved-courses", methods=["POST"])
@login_required
def save_course():
    course_id = _int_field(json_body(), "courseId")
    if course_id is None:
        return api_error("courseId is required", 400)
    if not db.session.get(Course, course_id):
        return api_error("Course not found", 404)

    existing = SavedCourse.query.filter_by(user_id=current_user.id, course_id=course_id).first()
    if existing:
        return jsonify({"ok": True, "savedCourse": existing.to_dict()})

    try:
        saved = SavedCourse(user_id=current_user.id, course_id=course_id)
        db.session.add(saved)
        db.session.commit()
    except IntegrityError:
        # lost a race against an identical request
        db.session.rollback()
        saved = SavedCourse.query.filter_by(user_id=current_user.id, course_id=course_id).first()
        return jsonify({"ok": True, "savedCourse": saved.to_dict()})
    except Exception as e:
        db.session.rollback()
        log.exception("Save course failed user=%s course=%s", current_user.id, course_id)
        return api_error("Failed to save course", 500, e)

    return jsonify({"ok": True, "savedCourse": saved.to_dict()}), 201


@catalog_bp.route("/saved-courses/<int:course_id>", methods=["DELETE"])
@login_required
def unsave_course(course_id: int):
    saved = SavedCourse.query.filter_by(user_id=current_user.id, course_id=course_id).first()
    if not saved:
        return api_error("Saved course not found", 404)
    try:
        db.session.delete(saved)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        log.exception("Unsave course failed user=%s course=%s", current_user.id, course_id)
        return api_error("Failed to remove saved course", 500, e)
    return jsonify({"ok": True, "message": "Course removed"})


# ---------------------------
# Saved projects
# ---------------------------

@catalog_bp.route("/saved-projects", methods=["GET"])
@login_required
def saved_projects():
    rows = (
        SavedProject.query.filter_by(user_id=current_user.id)
        .order_by(SavedProject.created_at.desc(), SavedProject.id.desc())
        .all()
    )
    return jsonify({"ok": True, "savedProjects": [r.to_dict() for r in rows]})


@catalog_bp.route("/saved-projects", methods=["POST"])
@login_required
def save_project():
    project_id = _int_field(json_body(), "projectId")
    if project_id is None:
        return api_error("projectId is required", 400)
    if not db.session.get(Project, project_id):
        return api_error("Project not found", 404)

    existing = SavedProject.query.filter_by(user_id=current_user.id, project_id=project_id).first()
    if existing:
        return jsonify({"ok": True, "savedProject": existing.to_dict()})

    try:
        saved = SavedProject(user_id=current_user.id, project_id=project_id)
        db.session.add(saved)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        saved = SavedProject.query.filter_by(user_id=current_user.id, project_id=project_id).first()
        return jsonify({"ok": True, "savedProject": saved.to_dict()})
    except Exception as e:
        db.session.rollback()
        log.exception("Save project failed user=%s project=%s", current_user.id, project_id)
        return api_error("Failed to save project", 500, e)

    return jsonify({"ok": True, "savedProject": saved.to_dict()}), 201


@catalog_bp.route("/saved-projects/<int:project_id>", methods=["PATCH"])
@login_required
def update_saved_project(project_id: int):
    flag = json_body().get("isCompleted")
    if not isinstance(flag, bool):
        return api_error("isCompleted must be a boolean", 400)

    try:
        saved = toggle_saved_project(current_user.id, project_id, flag)
    except Exception as e:
        log.exception("Saved project update failed user=%s project=%s", current_user.id, project_id)
        return api_error("Failed to update saved project", 500, e)

    if saved is None:
        return api_error("Saved project not found", 404)
    return jsonify({"ok": True, "savedProject": saved.to_dict()})


@catalog_bp.route("/saved-projects/<int:project_id>", methods=["DELETE"])
@login_required
def unsave_project(project_id: int):
    saved = SavedProject.query.filter_by(user_id=current_user.id, project_id=project_id).first()
    if not saved:
        return api_error("Saved project not found", 404)
    try:
        db.session.delete(saved)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        log.exception("Unsave project failed user=%s project=%s", current_user.id, project_id)
        return api_error("Failed to remove saved project", 500, e)
    return jsonify({"ok": True, "message": "Project removed"})
