# modules/skills/routes.py
import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from models import PROFICIENCY_LEVELS, SKILL_CATEGORIES, ResumeUpload, Skill, db
from modules.common.ai import extract_skills_from_text
from modules.common.http import api_error, json_body, str_field
from modules.common.profile_loader import load_user_skills
from modules.resume.utils import allowed_resume_file, extract_text_from_upload

log = logging.getLogger(__name__)

skills_bp = Blueprint("skills", __name__)

MIN_RESUME_TEXT = 50


@skills_bp.route("", methods=["GET"])
@login_required
def list_skills():
    skills = load_user_skills(current_user.id)
    return jsonify({"ok": True, "skills": [s.to_dict() for s in skills]})


@skills_bp.route("", methods=["POST"])
@login_required
def create_skill():
    payload = json_body()
    name = str_field(payload, "name")
    category = str_field(payload, "category").lower()
    proficiency = str_field(payload, "proficiency").lower()

    if not name:
        return api_error("Skill name is required", 400)
    if category not in SKILL_CATEGORIES:
        return api_error(f"category must be one of: {', '.join(SKILL_CATEGORIES)}", 400)
    if proficiency not in PROFICIENCY_LEVELS:
        return api_error(f"proficiency must be one of: {', '.join(PROFICIENCY_LEVELS)}", 400)

    try:
        skill = Skill(
            user_id=current_user.id,
            name=name[:120],
            category=category,
            proficiency=proficiency,
        )
        db.session.add(skill)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        log.exception("Skill create failed for user %s", current_user.id)
        return api_error("Failed to create skill", 500, e)

    return jsonify({"ok": True, "skill": skill.to_dict()}), 201


@skills_bp.route("/<int:skill_id>", methods=["DELETE"])
@login_required
def delete_skill(skill_id: int):
    skill = Skill.query.filter_by(id=skill_id, user_id=current_user.id).first()
    if not skill:
        return api_error("Skill not found", 404)

    try:
        db.session.delete(skill)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        log.exception("Skill delete failed user=%s skill=%s", current_user.id, skill_id)
        return api_error("Failed to delete skill", 500, e)

    return jsonify({"ok": True, "message": "Skill deleted"})


@skills_bp.route("/extract", methods=["POST"])
@login_required
def extract():
    """
    Upload a resume (multipart field 'resume'), let the model pull skills out
    of it and add them to the user's list.
    """
    f = request.files.get("resume")
    if not f or not f.filename:
        return api_error("No file uploaded", 400)
    if not allowed_resume_file(f.filename):
        return api_error("Please upload a PDF, DOCX or TXT file", 400)

    text = extract_text_from_upload(f)
    if not text or len(text.strip()) < MIN_RESUME_TEXT:
        return api_error(
            "Could not extract enough text from the file. Please upload a text-based resume.",
            400,
        )

    extracted = extract_skills_from_text(text)
    if not extracted:
        return api_error(
            "No skills could be identified from your resume. Please try adding skills manually.",
            400,
        )

    try:
        created = []
        for item in extracted:
            skill = Skill(
                user_id=current_user.id,
                name=item["name"],
                category=item["category"],
                proficiency=item["proficiency"],
            )
            db.session.add(skill)
            created.append(skill)

        db.session.add(
            ResumeUpload(
                user_id=current_user.id,
                filename=f.filename[:255],
                extracted_skills=extracted,
            )
        )
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        log.exception("Saving extracted skills failed for user %s", current_user.id)
        return api_error("Failed to save extracted skills", 500, e)

    log.info("Resume %s: %d skills added for user %s", f.filename, len(created), current_user.id)
    return jsonify(
        {
            "ok": True,
            "extractedCount": len(created),
            "skills": [s.to_dict() for s in created],
        }
    )
