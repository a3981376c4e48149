from datetime import datetime

from flask_login import UserMixin
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Index, UniqueConstraint
from werkzeug.security import check_password_hash, generate_password_hash

db = SQLAlchemy()

SKILL_CATEGORIES = ("technical", "tools", "soft")
PROFICIENCY_LEVELS = ("beginner", "intermediate", "advanced", "expert")
ROADMAP_PHASES = ("Beginner", "Intermediate", "Advanced")


def _iso(dt):
    return dt.isoformat() if dt else None


# ---------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------
class User(UserMixin, db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)

    # Auth
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile (self-service editable)
    education = db.Column(db.String(255), nullable=True)
    current_role = db.Column(db.String(200), nullable=True)
    experience_level = db.Column(db.String(64), nullable=True)
    interests = db.Column(db.JSON, default=list)  # ["AI", "Open source"]
    career_goals = db.Column(db.JSON, default=list)  # ["Land a backend role"]

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # helpers
    def set_password(self, pw: str):
        self.password_hash = generate_password_hash(pw)

    def check_password(self, pw: str) -> bool:
        return check_password_hash(self.password_hash, pw)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "education": self.education,
            "currentRole": self.current_role,
            "experienceLevel": self.experience_level,
            "interests": list(self.interests or []),
            "careerGoals": list(self.career_goals or []),
            "createdAt": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


# ---------------------------------------------------------------------
# Skills (manual entry or bulk from resume extraction)
# ---------------------------------------------------------------------
class Skill(db.Model):
    __tablename__ = "skill"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name = db.Column(db.String(120), nullable=False)
    category = db.Column(db.String(20), nullable=False)  # technical | tools | soft
    proficiency = db.Column(db.String(20), nullable=False)  # beginner .. expert
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        "User", backref=db.backref("skills", lazy=True, cascade="all, delete-orphan")
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "category": self.category,
            "proficiency": self.proficiency,
            "createdAt": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<Skill {self.id} u={self.user_id} {self.name}>"


# ---------------------------------------------------------------------
# Career recommendations (replaced wholesale on every generate)
# ---------------------------------------------------------------------
class CareerPath(db.Model):
    __tablename__ = "career_path"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    match_percentage = db.Column(db.Integer, nullable=False, default=0)
    match_reasons = db.Column(db.JSON, default=list)
    required_skills = db.Column(db.JSON, default=list)
    salary_range = db.Column(db.String(120), nullable=True)
    demand_level = db.Column(db.String(20), nullable=True)  # High | Medium | Low
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        "User",
        backref=db.backref("career_paths", lazy=True, cascade="all, delete-orphan"),
    )

    @property
    def is_selected(self) -> bool:
        sel = db.session.get(CareerSelection, self.user_id)
        return bool(sel and sel.career_path_id == self.id)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "matchPercentage": self.match_percentage,
            "matchReasons": list(self.match_reasons or []),
            "requiredSkills": list(self.required_skills or []),
            "salaryRange": self.salary_range,
            "demandLevel": self.demand_level,
            "isSelected": self.is_selected,
            "createdAt": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<CareerPath {self.id} u={self.user_id} {self.title[:30]}>"


class CareerSelection(db.Model):
    """
    The single "selected career path" of a user.

    One row per user (user_id is the primary key), so a user can never have
    two selected paths. Every selection bumps `version`.
    """
    __tablename__ = "career_selection"

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    career_path_id = db.Column(
        db.Integer,
        db.ForeignKey("career_path.id", ondelete="CASCADE"),
        nullable=False,
    )
    version = db.Column(db.Integer, default=1, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self):
        return f"<CareerSelection u={self.user_id} cp={self.career_path_id} v{self.version}>"


# ---------------------------------------------------------------------
# Roadmap (at most one per user) + ordered steps
# ---------------------------------------------------------------------
class Roadmap(db.Model):
    __tablename__ = "roadmap"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    career_path_id = db.Column(
        db.Integer,
        db.ForeignKey("career_path.id", ondelete="SET NULL"),
        nullable=True,
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        "User", backref=db.backref("roadmaps", lazy=True, cascade="all, delete-orphan")
    )
    career_path = db.relationship("CareerPath")

    def to_dict(self, with_steps: bool = True):
        out = {
            "id": self.id,
            "userId": self.user_id,
            "careerPathId": self.career_path_id,
            "title": self.title,
            "description": self.description,
            "createdAt": _iso(self.created_at),
        }
        if with_steps:
            out["steps"] = [s.to_dict() for s in self.steps]
            out["careerPath"] = self.career_path.to_dict() if self.career_path else None
        return out

    def __repr__(self):
        return f"<Roadmap {self.id} u={self.user_id} {self.title[:30]}>"


class RoadmapStep(db.Model):
    __tablename__ = "roadmap_step"

    id = db.Column(db.Integer, primary_key=True)
    roadmap_id = db.Column(
        db.Integer,
        db.ForeignKey("roadmap.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    phase = db.Column(db.String(20), nullable=False)  # Beginner | Intermediate | Advanced
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    skills = db.Column(db.JSON, default=list)
    duration = db.Column(db.String(64), nullable=True)
    order_index = db.Column(db.Integer, nullable=False)
    is_completed = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    roadmap = db.relationship(
        "Roadmap",
        backref=db.backref(
            "steps",
            lazy=True,
            cascade="all, delete-orphan",
            order_by="RoadmapStep.order_index",
        ),
    )

    __table_args__ = (
        Index("ix_roadmap_step_roadmap_order", "roadmap_id", "order_index"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "roadmapId": self.roadmap_id,
            "phase": self.phase,
            "title": self.title,
            "description": self.description,
            "skills": list(self.skills or []),
            "duration": self.duration,
            "orderIndex": self.order_index,
            "isCompleted": bool(self.is_completed),
        }

    def __repr__(self):
        return f"<RoadmapStep {self.id} r={self.roadmap_id} #{self.order_index} {self.phase}>"


# ---------------------------------------------------------------------
# Static catalog (seeded) + per-user saved items
# ---------------------------------------------------------------------
class Course(db.Model):
    __tablename__ = "course"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    platform = db.Column(db.String(120), nullable=False)
    url = db.Column(db.String(500), nullable=False)
    image_url = db.Column(db.String(500), nullable=True)
    instructor = db.Column(db.String(120), nullable=True)
    duration = db.Column(db.String(64), nullable=True)
    level = db.Column(db.String(32), nullable=False)
    skills = db.Column(db.JSON, default=list)
    is_free = db.Column(db.Boolean, default=False, nullable=False)
    rating = db.Column(db.String(16), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "platform": self.platform,
            "url": self.url,
            "imageUrl": self.image_url,
            "instructor": self.instructor,
            "duration": self.duration,
            "level": self.level,
            "skills": list(self.skills or []),
            "isFree": bool(self.is_free),
            "rating": self.rating,
        }

    def __repr__(self):
        return f"<Course {self.id} {self.title[:30]}>"


class Project(db.Model):
    __tablename__ = "project"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    difficulty = db.Column(db.String(32), nullable=False)
    skills = db.Column(db.JSON, default=list)
    github_url = db.Column(db.String(500), nullable=True)
    phase = db.Column(db.String(20), nullable=False)
    estimated_time = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "skills": list(self.skills or []),
            "githubUrl": self.github_url,
            "phase": self.phase,
            "estimatedTime": self.estimated_time,
        }

    def __repr__(self):
        return f"<Project {self.id} {self.title[:30]}>"


class SavedCourse(db.Model):
    __tablename__ = "saved_course"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    course_id = db.Column(
        db.Integer,
        db.ForeignKey("course.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        "User",
        backref=db.backref("saved_courses", lazy=True, cascade="all, delete-orphan"),
    )
    course = db.relationship("Course")

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_saved_course_user_course"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "courseId": self.course_id,
            "course": self.course.to_dict() if self.course else None,
            "createdAt": _iso(self.created_at),
        }


class SavedProject(db.Model):
    __tablename__ = "saved_project"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("project.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_completed = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        "User",
        backref=db.backref("saved_projects", lazy=True, cascade="all, delete-orphan"),
    )
    project = db.relationship("Project")

    __table_args__ = (
        UniqueConstraint("user_id", "project_id", name="uq_saved_project_user_project"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "projectId": self.project_id,
            "isCompleted": bool(self.is_completed),
            "project": self.project.to_dict() if self.project else None,
            "createdAt": _iso(self.created_at),
        }


# ---------------------------------------------------------------------
# Resume uploads (audit only: filename + raw extracted payload)
# ---------------------------------------------------------------------
class ResumeUpload(db.Model):
    __tablename__ = "resume_upload"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("user.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    filename = db.Column(db.String(255), nullable=False)
    extracted_skills = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        "User",
        backref=db.backref("resume_uploads", lazy=True, cascade="all, delete-orphan"),
    )

    def __repr__(self):
        return f"<ResumeUpload {self.id} u={self.user_id} {self.filename}>"
