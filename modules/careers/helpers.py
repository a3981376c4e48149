# modules/careers/helpers.py
"""
Selection & roadmap materialization.

Every function takes the owning user id; rows belonging to anyone else are
treated as missing. Each mutation commits once, and on a storage error the
session is rolled back and the error propagates to the route.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from models import CareerPath, CareerSelection, Roadmap, RoadmapStep, db
from modules.common.ai import generate_roadmap
from modules.common.profile_loader import load_user_skills

log = logging.getLogger(__name__)


def get_owned_career_path(user_id: int, career_path_id: int) -> Optional[CareerPath]:
    return CareerPath.query.filter_by(id=career_path_id, user_id=user_id).first()


def list_career_paths(user_id: int) -> List[CareerPath]:
    return (
        CareerPath.query.filter_by(user_id=user_id)
        .order_by(CareerPath.match_percentage.desc(), CareerPath.id.asc())
        .all()
    )


def get_current_roadmap(user_id: int) -> Optional[Roadmap]:
    return Roadmap.query.filter_by(user_id=user_id).first()


# ---------------------------------------------------------------------
# Career paths
# ---------------------------------------------------------------------
def replace_career_paths(user_id: int, recommendations: Sequence[Dict[str, Any]]) -> List[CareerPath]:
    """
    Swap the user's career paths for a freshly generated set.

    The selection is cleared and the current roadmap (if any) is kept but
    detached from the old path before the old paths are deleted.
    """
    try:
        CareerSelection.query.filter_by(user_id=user_id).delete(synchronize_session=False)
        Roadmap.query.filter_by(user_id=user_id).update(
            {Roadmap.career_path_id: None}, synchronize_session=False
        )
        CareerPath.query.filter_by(user_id=user_id).delete(synchronize_session=False)

        for rec in recommendations:
            db.session.add(
                CareerPath(
                    user_id=user_id,
                    title=rec["title"],
                    description=rec.get("description") or "",
                    match_percentage=int(rec.get("match_percentage") or 0),
                    match_reasons=list(rec.get("match_reasons") or []),
                    required_skills=list(rec.get("required_skills") or []),
                    salary_range=rec.get("salary_range"),
                    demand_level=rec.get("demand_level"),
                )
            )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    # Objects loaded before the bulk statements may be stale
    db.session.expire_all()
    return list_career_paths(user_id)


def select_career_path(user_id: int, career_path_id: int) -> Optional[CareerPath]:
    """Mark one path as the user's selection. None when missing or not owned."""
    path = get_owned_career_path(user_id, career_path_id)
    if not path:
        return None

    try:
        sel = db.session.get(CareerSelection, user_id)
        if sel is None:
            db.session.add(
                CareerSelection(user_id=user_id, career_path_id=path.id, version=1)
            )
        else:
            sel.career_path_id = path.id
            sel.version = (sel.version or 0) + 1
            sel.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log.info("User %s selected career path %s", user_id, path.id)
    return path


# ---------------------------------------------------------------------
# Roadmap
# ---------------------------------------------------------------------
def regenerate_roadmap(user_id: int, career_path: CareerPath, skills=None) -> Roadmap:
    """
    Build a roadmap for `career_path` and make it the user's only roadmap.

    Generation runs before any write. Deleting the old roadmap, inserting the
    new one and its steps then happen in one transaction, so a failed insert
    leaves the previous roadmap in place.
    """
    if skills is None:
        skills = load_user_skills(user_id)

    data, used_live_ai = generate_roadmap(career_path, skills, return_source=True)
    steps = data.get("steps") or []

    try:
        for old in Roadmap.query.filter_by(user_id=user_id).all():
            db.session.delete(old)  # steps cascade
        # user_id is unique on roadmap; the delete must hit the DB before the insert
        db.session.flush()

        roadmap = Roadmap(
            user_id=user_id,
            career_path_id=career_path.id,
            title=data.get("title") or f"Roadmap to {career_path.title}",
            description=data.get("description") or "",
        )
        db.session.add(roadmap)
        db.session.flush()

        for idx, step in enumerate(steps):
            db.session.add(
                RoadmapStep(
                    roadmap_id=roadmap.id,
                    phase=step["phase"],
                    title=step["title"],
                    description=step.get("description") or "",
                    skills=list(step.get("skills") or []),
                    duration=step.get("duration"),
                    order_index=idx,
                    is_completed=False,
                )
            )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log.info(
        "Roadmap %s generated for user=%s career_path=%s steps=%d used_live_ai=%s",
        roadmap.id,
        user_id,
        career_path.id,
        len(steps),
        used_live_ai,
    )
    return roadmap


def select_and_regenerate(user_id: int, career_path_id: int) -> Optional[Roadmap]:
    """Select a career path and always rebuild its roadmap. None when not found."""
    path = select_career_path(user_id, career_path_id)
    if not path:
        return None
    return regenerate_roadmap(user_id, path)
