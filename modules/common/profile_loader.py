# modules/common/profile_loader.py

from __future__ import annotations
from typing import Any, Dict, List

from models import Skill


def _coerce_list(val: Any) -> List[str]:
    out: List[str] = []
    if isinstance(val, list):
        for v in val:
            if isinstance(v, str) and v.strip():
                out.append(v.strip())
    elif isinstance(val, str) and val.strip():
        # "AI, robotics" -> ["AI", "robotics"]
        out = [p.strip() for p in val.split(",") if p.strip()]
    return out


def load_user_skills(user_id: int) -> List[Skill]:
    """Newest first, the order skills are listed everywhere else."""
    return (
        Skill.query.filter_by(user_id=user_id)
        .order_by(Skill.created_at.desc(), Skill.id.desc())
        .all()
    )


def load_profile_snapshot(user) -> Dict[str, Any]:
    """
    Unified snapshot used by the recommendation prompts and the dashboard.
    - fields: name, education, current_role, experience_level, interests, career_goals
    - profile_strength_score: rough completion %
    - missing_sections: ['education', 'interests', ...]
    """
    data: Dict[str, Any] = {
        "name": (getattr(user, "name", "") or "").strip(),
        "education": (getattr(user, "education", "") or "").strip(),
        "current_role": (getattr(user, "current_role", "") or "").strip(),
        "experience_level": (getattr(user, "experience_level", "") or "").strip(),
        "interests": _coerce_list(getattr(user, "interests", None)),
        "career_goals": _coerce_list(getattr(user, "career_goals", None)),
    }

    has_skills = bool(getattr(user, "id", None)) and (
        Skill.query.filter_by(user_id=user.id).first() is not None
    )

    # Basic profile strength heuristic
    strength = 0
    if data["name"]:
        strength += 10
    if data["education"]:
        strength += 15
    if data["current_role"]:
        strength += 15
    if data["experience_level"]:
        strength += 10
    if data["interests"]:
        strength += 10
    if data["career_goals"]:
        strength += 10
    if has_skills:
        strength += 30

    data["profile_strength_score"] = min(100, strength)

    missing = []
    for key in ("education", "current_role", "experience_level", "interests", "career_goals"):
        if not data[key]:
            missing.append(key)
    if not has_skills:
        missing.append("skills")
    data["missing_sections"] = missing

    return data
