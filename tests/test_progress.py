import pytest
from sqlalchemy.exc import IntegrityError

from conftest import add_skills, make_user

from models import Course, Project, SavedCourse, SavedProject, db
from modules.careers.helpers import replace_career_paths, select_and_regenerate
from modules.common.ai import default_career_recommendations
from modules.common.progress import (
    compute_dashboard_stats,
    toggle_roadmap_step,
    toggle_saved_project,
)


def _user_with_roadmap(email="ada@example.com"):
    u = make_user(email)
    add_skills(u.id, "Python")
    (path,) = replace_career_paths(u.id, default_career_recommendations([{"name": "Python"}]))
    roadmap = select_and_regenerate(u.id, path.id)
    return u, roadmap


def test_stats_without_roadmap_are_zero(ctx):
    u = make_user()
    stats = compute_dashboard_stats(u.id)
    assert stats["totalSteps"] == 0
    assert stats["completedSteps"] == 0
    assert stats["skills"] == 0
    assert stats["careerPaths"] == 0


def test_toggle_step_and_stats(ctx):
    u, roadmap = _user_with_roadmap()
    first, second = roadmap.steps[0], roadmap.steps[1]

    assert toggle_roadmap_step(u.id, first.id, True).is_completed is True
    assert toggle_roadmap_step(u.id, second.id, True).is_completed is True
    assert toggle_roadmap_step(u.id, second.id, False).is_completed is False

    stats = compute_dashboard_stats(u.id)
    assert stats["totalSteps"] == 9
    assert stats["roadmapSteps"] == 9
    assert stats["completedSteps"] == 1
    assert stats["skills"] == 1
    assert stats["careerPaths"] == 1


def test_toggle_foreign_step_is_not_found(ctx):
    owner, roadmap = _user_with_roadmap("owner@example.com")
    intruder = make_user("intruder@example.com")
    step_id = roadmap.steps[0].id

    assert toggle_roadmap_step(intruder.id, step_id, True) is None
    assert toggle_roadmap_step(owner.id, 123456, True) is None
    db.session.expire_all()
    assert roadmap.steps[0].is_completed is False


def test_toggle_saved_project(ctx):
    u = make_user()
    other = make_user("other@example.com")
    project = Project.query.first()
    db.session.add(SavedProject(user_id=u.id, project_id=project.id))
    db.session.commit()

    saved = toggle_saved_project(u.id, project.id, True)
    assert saved.is_completed is True
    assert toggle_saved_project(other.id, project.id, True) is None

    stats = compute_dashboard_stats(u.id)
    assert stats["savedProjects"] == 1
    assert stats["completedProjects"] == 1


def test_saved_pair_is_unique_in_storage(ctx):
    u = make_user()
    course = Course.query.first()
    db.session.add(SavedCourse(user_id=u.id, course_id=course.id))
    db.session.commit()

    db.session.add(SavedCourse(user_id=u.id, course_id=course.id))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()
    assert compute_dashboard_stats(u.id)["savedCourses"] == 1
