# modules/common/ai.py
import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Sequence

from models import PROFICIENCY_LEVELS, ROADMAP_PHASES, SKILL_CATEGORIES

log = logging.getLogger(__name__)

# -------------------------------------------------------------------
# Config (env-driven)
# -------------------------------------------------------------------
OPENAI_MODEL_DEEP = os.getenv("OPENAI_MODEL_DEEP", "gpt-4o")
REQUEST_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT_SECS", "40"))
REQUEST_RETRIES = int(os.getenv("OPENAI_RETRIES", "1"))

# Resume excerpt sent for skill extraction
MAX_RESUME_CHARS = 4000

DEMAND_LEVELS = ("High", "Medium", "Low")

WEB_KEYWORDS = ("javascript", "typescript", "react", "html", "css", "node")
DATA_KEYWORDS = ("python", "sql", "data", "analytics", "machine learning", "statistics")


# -------------------------------------------------------------------
# Simple helpers
# -------------------------------------------------------------------
def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a model instance or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _str_list(val: Any, limit: int = 20, max_len: int = 200) -> List[str]:
    if not isinstance(val, list):
        return []
    items = [str(x).strip()[:max_len] for x in val if str(x).strip()]
    return items[:limit]


def _clamp_pct(x: Any) -> int:
    try:
        v = int(round(float(x)))
    except Exception:
        v = 0
    return max(0, min(100, v))


def _strip_fences(raw: str) -> str:
    raw = (raw or "").strip()
    # Strip ```json ... ``` if the model wraps it
    if raw.startswith("```"):
        raw = raw.strip("`")
        if raw.lower().startswith("json"):
            raw = raw[4:]
    return raw.strip()


def normalize_model_list(payload: Any, keys: Sequence[str]) -> Optional[List[Any]]:
    """
    Turn a model JSON payload into the list we asked for.

    Precedence:
      1. payload is already a list -> payload
      2. payload is a dict -> value of the first key in `keys` that holds a list
      3. payload is a dict -> first list-valued entry in the dict (insertion order)
      4. otherwise -> None (caller treats it as a failed generation)
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return None

    for key in keys:
        val = payload.get(key)
        if isinstance(val, list):
            return val

    for val in payload.values():
        if isinstance(val, list):
            return val

    return None


# -------------------------------------------------------------------
# Upstream call (OpenAI chat completions, JSON mode)
# -------------------------------------------------------------------
def _chat_json(system: str, prompt: str, temperature: float = 0.4) -> Any:
    """
    One chat completion constrained to a JSON object.

    Raises on transport errors, timeouts, missing API key, empty content or
    non-JSON content. Callers own the fallback policy.
    """
    from openai import OpenAI

    client = OpenAI(
        base_url=os.getenv("OPENAI_BASE_URL") or None,
        timeout=REQUEST_TIMEOUT,
        max_retries=REQUEST_RETRIES,
    )
    resp = client.chat.completions.create(
        model=OPENAI_MODEL_DEEP,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        temperature=temperature,
        response_format={"type": "json_object"},
    )
    raw = _strip_fences(resp.choices[0].message.content or "")
    if not raw:
        raise ValueError("Empty response from model")
    return json.loads(raw)


# -------------------------------------------------------------------
# Career recommendations
# -------------------------------------------------------------------
CAREER_SYSTEM = (
    "You are a career counselor AI. Analyze skills and provide personalized "
    "career recommendations. Always respond with valid JSON."
)

CAREER_PROMPT = """\
Based on the following user profile and skills, recommend 3-5 suitable career paths.

User Profile:
- Name: {name}
- Education: {education}
- Current Role: {current_role}
- Experience Level: {experience_level}
- Interests: {interests}
- Career Goals: {career_goals}

Skills:
{skills_list}

For each career path, provide:
1. A job title
2. A brief description (2-3 sentences)
3. Match percentage (based on how well their skills align)
4. 3 specific reasons why this suits them
5. Required skills for this career
6. Salary range (e.g., "$70,000 - $120,000")
7. Demand level (High, Medium, or Low)

Return a JSON object with a "careers" array. Each item has: title, description,
matchPercentage (integer 0-100), matchReasons (array of 3 strings),
requiredSkills (array of strings), salaryRange (string), demandLevel (string).
"""


def describe_skills(skills: Iterable[Any]) -> str:
    parts = []
    for s in skills or []:
        name = str(_field(s, "name") or "").strip()
        if not name:
            continue
        parts.append(
            f"{name} ({_field(s, 'proficiency') or 'unknown'}, {_field(s, 'category') or 'technical'})"
        )
    return ", ".join(parts)


def _or_unspecified(val: Any) -> str:
    if isinstance(val, (list, tuple)):
        val = ", ".join(str(x) for x in val if str(x).strip())
    val = str(val or "").strip()
    return val or "Not specified"


def _build_career_prompt(skills: Sequence[Any], profile: Dict[str, Any]) -> str:
    profile = profile or {}
    return CAREER_PROMPT.format(
        name=_or_unspecified(profile.get("name")),
        education=_or_unspecified(profile.get("education")),
        current_role=_or_unspecified(profile.get("current_role")),
        experience_level=_or_unspecified(profile.get("experience_level")),
        interests=_or_unspecified(profile.get("interests")),
        career_goals=_or_unspecified(profile.get("career_goals")),
        skills_list=describe_skills(skills),
    )


def _light_validate_career(item: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(item, dict):
        return None
    title = str(item.get("title") or "").strip()
    if not title:
        return None
    demand = str(item.get("demandLevel") or item.get("demand_level") or "").strip().title()
    return {
        "title": title[:200],
        "description": str(item.get("description") or "").strip()[:1000],
        "match_percentage": _clamp_pct(
            item.get("matchPercentage", item.get("match_percentage"))
        ),
        "match_reasons": _str_list(item.get("matchReasons") or item.get("match_reasons"), 3, 300),
        "required_skills": _str_list(item.get("requiredSkills") or item.get("required_skills"), 20, 80),
        "salary_range": str(item.get("salaryRange") or item.get("salary_range") or "").strip()[:120] or None,
        "demand_level": demand if demand in DEMAND_LEVELS else None,
    }


def default_career_recommendations(skills: Sequence[Any]) -> List[Dict[str, Any]]:
    """Keyword fallback. Never returns an empty list."""
    names = [str(_field(s, "name") or "").lower() for s in skills or []]
    has_web = any(k in n for n in names for k in WEB_KEYWORDS)
    has_data = any(k in n for n in names for k in DATA_KEYWORDS)

    recs: List[Dict[str, Any]] = []
    if has_web:
        recs.append(
            {
                "title": "Full-Stack Developer",
                "description": (
                    "Build complete web applications from frontend to backend. "
                    "Work with modern frameworks and databases to create scalable solutions."
                ),
                "match_percentage": 85,
                "match_reasons": [
                    "Your JavaScript/TypeScript skills are highly valued",
                    "Frontend experience translates directly to this role",
                    "Growing demand for full-stack developers in the industry",
                ],
                "required_skills": ["JavaScript", "TypeScript", "React", "Node.js", "SQL", "REST APIs"],
                "salary_range": "$80,000 - $150,000",
                "demand_level": "High",
            }
        )
    if has_data:
        recs.append(
            {
                "title": "Data Analyst",
                "description": (
                    "Transform raw data into actionable insights. Use statistical analysis "
                    "and visualization to drive business decisions."
                ),
                "match_percentage": 80,
                "match_reasons": [
                    "Your analytical skills are perfect for data analysis",
                    "SQL and Python knowledge is essential for this role",
                    "Data-driven decision making is increasingly important",
                ],
                "required_skills": ["Python", "SQL", "Excel", "Data Visualization", "Statistics"],
                "salary_range": "$60,000 - $100,000",
                "demand_level": "High",
            }
        )
    if not recs:
        recs.append(
            {
                "title": "Software Developer",
                "description": (
                    "Design, develop, and maintain software applications. Work with various "
                    "technologies to solve complex problems."
                ),
                "match_percentage": 70,
                "match_reasons": [
                    "Software development is a versatile career path",
                    "Your existing skills provide a foundation to build on",
                    "Continuous learning is valued in this field",
                ],
                "required_skills": ["Programming", "Problem Solving", "Version Control", "Testing", "Documentation"],
                "salary_range": "$70,000 - $130,000",
                "demand_level": "High",
            }
        )
    return recs


def generate_career_recommendations(
    skills: Sequence[Any],
    profile: Optional[Dict[str, Any]] = None,
    return_source: bool = False,
):
    """
    Career paths for a non-empty skill list.

    Any upstream problem (transport, timeout, non-JSON, wrong shape, no usable
    items) falls back to keyword matching, so the result is never empty.
    """
    used_live_ai = False
    try:
        payload = _chat_json(CAREER_SYSTEM, _build_career_prompt(skills, profile or {}))
        items = normalize_model_list(payload, ("careers", "recommendations"))
        if items is None:
            raise ValueError("No career list in model response")
        recs = [r for r in (_light_validate_career(i) for i in items) if r]
        if not recs:
            raise ValueError("Model returned no usable careers")
        used_live_ai = True
    except Exception as e:
        log.warning("Career recommendation fell back to keyword matching: %s", e)
        recs = default_career_recommendations(skills)

    return (recs, used_live_ai) if return_source else recs


# -------------------------------------------------------------------
# Learning roadmap
# -------------------------------------------------------------------
ROADMAP_SYSTEM = (
    "You are a learning path designer. Create comprehensive, practical learning "
    "roadmaps. Always respond with valid JSON."
)

ROADMAP_PROMPT = """\
Create a detailed learning roadmap for someone wanting to become a {title}.

Current Skills: {current_skills}
Required Skills for Career: {required_skills}
Career Description: {description}

Create a structured roadmap with 9-12 learning steps divided into three phases:
- Beginner (3-4 steps): Foundation skills and concepts
- Intermediate (3-4 steps): Applied knowledge and practical experience
- Advanced (3-4 steps): Specialization and mastery

For each step, provide:
1. A clear title
2. A description of what to learn (2-3 sentences)
3. Skills that will be gained
4. Estimated duration (e.g., "2-3 weeks", "1 month")

Return a JSON object with:
- title: "Roadmap to {title}"
- description: Brief overview of the roadmap
- steps: array of objects with phase ("Beginner" | "Intermediate" | "Advanced"),
  title, description, skills (array of strings) and duration
"""


def _build_roadmap_prompt(career_path: Any, current_skills: Sequence[Any]) -> str:
    names = [str(_field(s, "name") or "").strip() for s in current_skills or []]
    return ROADMAP_PROMPT.format(
        title=_field(career_path, "title") or "Software Developer",
        current_skills=", ".join(n for n in names if n) or "None yet",
        required_skills=", ".join(_field(career_path, "required_skills") or []) or "Not specified",
        description=_field(career_path, "description") or "Not specified",
    )


def _light_validate_step(item: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(item, dict):
        return None
    phase = str(item.get("phase") or "").strip().title()
    title = str(item.get("title") or "").strip()
    if phase not in ROADMAP_PHASES or not title:
        return None
    duration = str(item.get("duration") or "").strip()
    return {
        "phase": phase,
        "title": title[:255],
        "description": str(item.get("description") or "").strip()[:1000],
        "skills": _str_list(item.get("skills"), 12, 80),
        "duration": duration[:64] or None,
    }


def default_roadmap(career_path: Any) -> Dict[str, Any]:
    """Fixed 9-step template: 3 steps per phase, Beginner -> Advanced."""
    title = _field(career_path, "title") or "Software Developer"
    required = list(_field(career_path, "required_skills") or [])

    return {
        "title": f"Roadmap to {title}",
        "description": (
            f"A comprehensive learning path to become a {title}. "
            "Follow these steps to build your skills progressively."
        ),
        "steps": [
            {
                "phase": "Beginner",
                "title": "Foundation Skills",
                "description": "Build a strong foundation in the core concepts required for this career path.",
                "skills": required[0:2],
                "duration": "2-3 weeks",
            },
            {
                "phase": "Beginner",
                "title": "Essential Tools",
                "description": "Learn the essential tools and technologies used in the industry.",
                "skills": ["Version Control", "Development Environment"],
                "duration": "1-2 weeks",
            },
            {
                "phase": "Beginner",
                "title": "Basic Projects",
                "description": "Apply your knowledge by building small practice projects.",
                "skills": ["Problem Solving", "Project Structure"],
                "duration": "2-3 weeks",
            },
            {
                "phase": "Intermediate",
                "title": "Advanced Concepts",
                "description": "Dive deeper into advanced topics and best practices.",
                "skills": required[2:4],
                "duration": "3-4 weeks",
            },
            {
                "phase": "Intermediate",
                "title": "Real-World Projects",
                "description": "Build portfolio-worthy projects that demonstrate your skills.",
                "skills": ["Project Management", "Documentation"],
                "duration": "4-6 weeks",
            },
            {
                "phase": "Intermediate",
                "title": "Collaboration Skills",
                "description": "Learn to work effectively in teams and contribute to larger projects.",
                "skills": ["Team Collaboration", "Code Review"],
                "duration": "2-3 weeks",
            },
            {
                "phase": "Advanced",
                "title": "Specialization",
                "description": "Focus on a specific area within your career path to become an expert.",
                "skills": required[4:6],
                "duration": "4-6 weeks",
            },
            {
                "phase": "Advanced",
                "title": "Industry Best Practices",
                "description": "Learn industry standards and best practices for professional work.",
                "skills": ["Architecture", "Performance Optimization"],
                "duration": "3-4 weeks",
            },
            {
                "phase": "Advanced",
                "title": "Career Preparation",
                "description": "Prepare for job interviews and build your professional network.",
                "skills": ["Interview Skills", "Networking"],
                "duration": "2-3 weeks",
            },
        ],
    }


def generate_roadmap(
    career_path: Any,
    current_skills: Sequence[Any],
    return_source: bool = False,
):
    """
    Phased roadmap for a career path. Steps keep the order the model produced;
    any failure returns the fixed template instead.
    """
    used_live_ai = False
    try:
        payload = _chat_json(ROADMAP_SYSTEM, _build_roadmap_prompt(career_path, current_skills))
        items = normalize_model_list(payload, ("steps", "roadmap"))
        if items is None:
            raise ValueError("No roadmap steps in model response")
        steps = [s for s in (_light_validate_step(i) for i in items) if s]
        if not steps:
            raise ValueError("Model returned no usable roadmap steps")

        meta = payload if isinstance(payload, dict) else {}
        title = str(meta.get("title") or "").strip() or f"Roadmap to {_field(career_path, 'title')}"
        data = {
            "title": title[:255],
            "description": str(meta.get("description") or "").strip()[:2000],
            "steps": steps,
        }
        used_live_ai = True
    except Exception as e:
        log.warning("Roadmap generation fell back to the default template: %s", e)
        data = default_roadmap(career_path)

    return (data, used_live_ai) if return_source else data


# -------------------------------------------------------------------
# Resume skill extraction
# -------------------------------------------------------------------
EXTRACT_SYSTEM = (
    "You are a resume parser AI. Extract and categorize professional skills "
    "from resumes. Always respond with valid JSON."
)

EXTRACT_PROMPT = """\
Extract professional skills from the following resume/CV text.

Text:
{text}

Identify all skills mentioned and categorize them:
- technical: Programming languages, frameworks, methodologies (e.g., Python, React, Agile)
- tools: Software, platforms, development tools (e.g., Git, Docker, AWS)
- soft: Communication, leadership, interpersonal skills (e.g., Team Leadership, Communication)

For each skill, estimate proficiency based on context:
- beginner: Just mentioned or listed
- intermediate: Used in projects
- advanced: Significant experience mentioned
- expert: Leadership or teaching mentioned

Return a JSON object with a "skills" array containing objects with: name, category, proficiency.
Limit to the top 15-20 most relevant skills.
"""

MAX_EXTRACTED_SKILLS = 20


def _light_validate_extracted(item: Any) -> Optional[Dict[str, str]]:
    if not isinstance(item, dict):
        return None
    name = str(item.get("name") or "").strip()
    if not name:
        return None
    category = str(item.get("category") or "").strip().lower()
    proficiency = str(item.get("proficiency") or "").strip().lower()
    return {
        "name": name[:120],
        "category": category if category in SKILL_CATEGORIES else "technical",
        "proficiency": proficiency if proficiency in PROFICIENCY_LEVELS else "beginner",
    }


def extract_skills_from_text(text: str) -> List[Dict[str, str]]:
    """
    Skills found in resume text. Only the first MAX_RESUME_CHARS characters
    are analyzed. No fallback: any failure yields [].
    """
    excerpt = (text or "")[:MAX_RESUME_CHARS]
    if not excerpt.strip():
        return []
    try:
        payload = _chat_json(EXTRACT_SYSTEM, EXTRACT_PROMPT.format(text=excerpt), temperature=0.2)
        items = normalize_model_list(payload, ("skills",)) or []
        skills = [s for s in (_light_validate_extracted(i) for i in items) if s]
    except Exception as e:
        log.warning("Skill extraction failed: %s", e)
        return []

    log.info("AI extracted %d skills from resume", len(skills))
    return skills[:MAX_EXTRACTED_SKILLS]
