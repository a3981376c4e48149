# modules/common/progress.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy import func

from models import (
    CareerPath,
    Roadmap,
    RoadmapStep,
    SavedCourse,
    SavedProject,
    Skill,
    db,
)

log = logging.getLogger(__name__)


def toggle_roadmap_step(user_id: int, step_id: int, is_completed: bool) -> Optional[RoadmapStep]:
    """
    Set a step's completion flag. The ownership check is part of the lookup
    (step -> roadmap -> user), so a foreign step looks exactly like a missing one.
    """
    step = (
        RoadmapStep.query.join(Roadmap, RoadmapStep.roadmap_id == Roadmap.id)
        .filter(RoadmapStep.id == step_id, Roadmap.user_id == user_id)
        .first()
    )
    if not step:
        return None

    try:
        step.is_completed = bool(is_completed)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return step


def toggle_saved_project(user_id: int, project_id: int, is_completed: bool) -> Optional[SavedProject]:
    saved = SavedProject.query.filter_by(user_id=user_id, project_id=project_id).first()
    if not saved:
        return None

    try:
        saved.is_completed = bool(is_completed)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return saved


def _count(model, user_id: int) -> int:
    return db.session.query(func.count(model.id)).filter(model.user_id == user_id).scalar() or 0


def compute_dashboard_stats(user_id: int) -> Dict[str, Any]:
    """Counts for the dashboard. No roadmap yet means 0 of 0 steps."""
    total_steps = 0
    completed_steps = 0

    roadmap = Roadmap.query.filter_by(user_id=user_id).first()
    if roadmap:
        total_steps = (
            db.session.query(func.count(RoadmapStep.id))
            .filter(RoadmapStep.roadmap_id == roadmap.id)
            .scalar()
            or 0
        )
        completed_steps = (
            db.session.query(func.count(RoadmapStep.id))
            .filter(
                RoadmapStep.roadmap_id == roadmap.id,
                RoadmapStep.is_completed.is_(True),
            )
            .scalar()
            or 0
        )

    completed_projects = (
        db.session.query(func.count(SavedProject.id))
        .filter(SavedProject.user_id == user_id, SavedProject.is_completed.is_(True))
        .scalar()
        or 0
    )

    return {
        "skills": _count(Skill, user_id),
        "careerPaths": _count(CareerPath, user_id),
        "roadmapSteps": total_steps,
        "savedCourses": _count(SavedCourse, user_id),
        "savedProjects": _count(SavedProject, user_id),
        "completedProjects": completed_projects,
        "completedSteps": completed_steps,
        "totalSteps": total_steps,
    }
