import io

from models import ResumeUpload, RoadmapStep, db

RESUME = (
    "Jane Doe - Frontend Engineer\n"
    "Five years building React and TypeScript applications, led a team of four.\n"
)


def _add_skill(c, name="React", category="technical", proficiency="advanced"):
    return c.post("/skills", json={"name": name, "category": category, "proficiency": proficiency})


def _upload(c, text=RESUME, filename="resume.txt"):
    return c.post(
        "/skills/extract",
        data={"resume": (io.BytesIO(text.encode()), filename)},
        content_type="multipart/form-data",
    )


# ---------------------------
# Auth
# ---------------------------

def test_health(client):
    assert client.get("/health").get_json() == {"ok": True, "status": "healthy"}


def test_protected_routes_return_401_json(client):
    for method, url in [
        ("get", "/skills"),
        ("post", "/careers/generate"),
        ("post", "/careers/1/select"),
        ("patch", "/roadmap-steps/1"),
        ("get", "/dashboard/stats"),
    ]:
        resp = getattr(client, method)(url)
        assert resp.status_code == 401, url
        assert resp.get_json() == {"ok": False, "error": "Unauthorized"}


def test_register_validation(client):
    assert client.post("/auth/register", json={"email": "a@b.c"}).status_code == 400
    short = client.post("/auth/register", json={"name": "A", "email": "a@b.c", "password": "123"})
    assert short.status_code == 400


def test_register_login_logout_me(client):
    resp = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "  Ada@Example.COM ", "password": "secret123"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["user"]["email"] == "ada@example.com"

    dup = client.post("/auth/register", json={"name": "X", "email": "ada@example.com", "password": "secret123"})
    assert dup.status_code == 400

    assert client.post("/auth/logout").status_code == 200
    assert client.get("/auth/me").status_code == 401

    bad = client.post("/auth/login", json={"email": "ada@example.com", "password": "nope"})
    assert bad.status_code == 401
    ok = client.post("/auth/login", json={"email": "ADA@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert client.get("/auth/me").get_json()["user"]["name"] == "Ada"


def test_update_profile(auth_client):
    resp = auth_client.patch(
        "/auth/me",
        json={"currentRole": "Analyst", "interests": "AI, robotics", "careerGoals": ["Lead a team"]},
    )
    user = resp.get_json()["user"]
    assert user["currentRole"] == "Analyst"
    assert user["interests"] == ["AI", "robotics"]
    assert user["careerGoals"] == ["Lead a team"]

    assert auth_client.patch("/auth/me", json={"name": ""}).status_code == 400
    assert auth_client.patch("/auth/me", json={"interests": 5}).status_code == 400


def test_auth_rejects_non_string_fields(client):
    resp = client.post("/auth/register", json={"name": "X", "email": 5, "password": "secret123"})
    assert resp.status_code == 400
    resp = client.post("/auth/register", json={"name": ["X"], "email": "x@example.com", "password": "secret123"})
    assert resp.status_code == 400
    resp = client.post("/auth/register", json={"name": "X", "email": "x@example.com", "password": 12345678})
    assert resp.status_code == 400

    assert client.post("/auth/login", json={"email": 5, "password": "secret123"}).status_code == 401
    assert client.post("/auth/login", json={"email": "ada@example.com", "password": {}}).status_code == 401


# ---------------------------
# Skills
# ---------------------------

def test_skill_crud(auth_client):
    assert _add_skill(auth_client, category="magic").status_code == 400
    assert _add_skill(auth_client, proficiency="godlike").status_code == 400

    created = _add_skill(auth_client)
    assert created.status_code == 201
    skill_id = created.get_json()["skill"]["id"]
    _add_skill(auth_client, name="SQL")

    names = [s["name"] for s in auth_client.get("/skills").get_json()["skills"]]
    assert names == ["SQL", "React"]

    assert auth_client.delete(f"/skills/{skill_id}").status_code == 200
    assert auth_client.delete(f"/skills/{skill_id}").status_code == 404


def test_skill_create_rejects_non_string_fields(auth_client):
    assert auth_client.post("/skills", json={"name": 123, "category": "technical", "proficiency": "advanced"}).status_code == 400
    assert auth_client.post("/skills", json={"name": "Go", "category": 1, "proficiency": "advanced"}).status_code == 400
    assert auth_client.post("/skills", json={"name": "Go", "category": "technical", "proficiency": None}).status_code == 400
    assert auth_client.get("/skills").get_json()["skills"] == []


def test_extract_requires_file(auth_client):
    resp = auth_client.post("/skills/extract", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_extract_rejects_short_text(auth_client, ai_returns):
    ai_returns({"skills": [{"name": "React"}]})
    resp = _upload(auth_client, text="React")
    assert resp.status_code == 400


def test_extract_rejects_unknown_type(auth_client):
    assert _upload(auth_client, filename="resume.exe").status_code == 400


def test_extract_nothing_found(auth_client):
    # model unavailable -> no skills
    resp = _upload(auth_client)
    assert resp.status_code == 400
    assert resp.get_json()["error"].startswith("No skills could be identified")


def test_extract_creates_skills_and_upload_record(app, auth_client, ai_returns):
    ai_returns(
        {
            "skills": [
                {"name": "React", "category": "technical", "proficiency": "advanced"},
                {"name": "Leadership", "category": "soft", "proficiency": "expert"},
            ]
        }
    )
    resp = _upload(auth_client)
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["extractedCount"] == 2
    assert {s["name"] for s in body["skills"]} == {"React", "Leadership"}

    with app.app_context():
        rec = ResumeUpload.query.filter_by(user_id=auth_client.user_id).one()
        assert rec.filename == "resume.txt"
        assert len(rec.extracted_skills) == 2


# ---------------------------
# Careers + roadmap
# ---------------------------

def test_generate_requires_skills(auth_client):
    resp = auth_client.post("/careers/generate")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Please add skills first"


def test_generate_fallback_scenario(auth_client):
    _add_skill(auth_client, name="React")
    resp = auth_client.post("/careers/generate")
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["usedLiveAi"] is False
    assert len(body["careerPaths"]) == 1
    path = body["careerPaths"][0]
    assert path["title"] == "Full-Stack Developer"
    assert path["matchPercentage"] == 85
    assert path["isSelected"] is False

    listed = auth_client.get("/careers").get_json()["careerPaths"]
    assert [p["id"] for p in listed] == [path["id"]]


def test_select_flow_and_step_toggle(app, auth_client):
    _add_skill(auth_client, name="Python")
    path_id = auth_client.post("/careers/generate").get_json()["careerPaths"][0]["id"]

    resp = auth_client.post(f"/careers/{path_id}/select")
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["message"]
    roadmap = body["roadmap"]
    assert roadmap["title"] == "Roadmap to Data Analyst"
    assert [s["orderIndex"] for s in roadmap["steps"]] == list(range(9))
    assert roadmap["careerPath"]["isSelected"] is True

    current = auth_client.get("/roadmaps/current").get_json()["roadmap"]
    assert current["id"] == roadmap["id"]

    step_id = roadmap["steps"][0]["id"]
    assert auth_client.patch(f"/roadmap-steps/{step_id}", json={}).status_code == 400
    assert auth_client.patch(f"/roadmap-steps/{step_id}", json={"isCompleted": "yes"}).status_code == 400
    assert auth_client.patch(f"/roadmap-steps/{step_id}", json={"isCompleted": 1}).status_code == 400

    ok = auth_client.patch(f"/roadmap-steps/{step_id}", json={"isCompleted": True})
    assert ok.status_code == 200
    assert ok.get_json()["step"]["isCompleted"] is True

    stats = auth_client.get("/dashboard/stats").get_json()
    assert stats["totalSteps"] == 9
    assert stats["completedSteps"] == 1
    assert stats["careerPaths"] == 1

    with app.app_context():
        assert db.session.get(RoadmapStep, step_id).is_completed is True


def test_select_missing_path_is_404(auth_client):
    assert auth_client.post("/careers/424242/select").status_code == 404


def test_cannot_touch_another_users_rows(app, auth_client):
    _add_skill(auth_client, name="React")
    path_id = auth_client.post("/careers/generate").get_json()["careerPaths"][0]["id"]
    roadmap = auth_client.post(f"/careers/{path_id}/select").get_json()["roadmap"]
    step_id = roadmap["steps"][0]["id"]

    other = app.test_client()
    other.post("/auth/register", json={"name": "Eve", "email": "eve@example.com", "password": "secret123"})

    assert other.post(f"/careers/{path_id}/select").status_code == 404
    assert other.patch(f"/roadmap-steps/{step_id}", json={"isCompleted": True}).status_code == 404
    assert other.get("/roadmaps/current").get_json()["roadmap"] is None


def test_dashboard_without_roadmap(auth_client):
    stats = auth_client.get("/dashboard/stats").get_json()
    assert stats["ok"] is True
    assert stats["totalSteps"] == 0
    assert stats["completedSteps"] == 0
    assert "skills" in stats["missingSections"]


# ---------------------------
# Catalog + saved items
# ---------------------------

def test_catalog_is_seeded_and_filterable(client):
    courses = client.get("/courses").get_json()["courses"]
    assert courses
    free = client.get("/courses?price=free").get_json()["courses"]
    assert free and all(c["isFree"] for c in free)
    react = client.get("/courses?q=react").get_json()["courses"]
    assert react and all(
        "react" in (c["title"] + c["description"] + " ".join(c["skills"])).lower() for c in react
    )
    advanced = client.get("/projects?phase=Advanced").get_json()["projects"]
    assert advanced and all(p["phase"] == "Advanced" for p in advanced)


def test_saved_courses(auth_client, client):
    course_id = client.get("/courses").get_json()["courses"][0]["id"]

    first = auth_client.post("/saved-courses", json={"courseId": course_id})
    assert first.status_code == 201
    again = auth_client.post("/saved-courses", json={"courseId": course_id})
    assert again.status_code == 200
    assert again.get_json()["savedCourse"]["id"] == first.get_json()["savedCourse"]["id"]

    saved = auth_client.get("/saved-courses").get_json()["savedCourses"]
    assert len(saved) == 1
    assert saved[0]["course"]["id"] == course_id

    assert auth_client.post("/saved-courses", json={}).status_code == 400
    assert auth_client.post("/saved-courses", json={"courseId": 99999}).status_code == 404
    assert auth_client.delete(f"/saved-courses/{course_id}").status_code == 200
    assert auth_client.delete(f"/saved-courses/{course_id}").status_code == 404


def test_saved_projects(auth_client, client):
    project_id = client.get("/projects").get_json()["projects"][0]["id"]

    assert auth_client.patch(f"/saved-projects/{project_id}", json={"isCompleted": True}).status_code == 404

    assert auth_client.post("/saved-projects", json={"projectId": project_id}).status_code == 201
    assert auth_client.post("/saved-projects", json={"projectId": project_id}).status_code == 200

    resp = auth_client.patch(f"/saved-projects/{project_id}", json={"isCompleted": True})
    assert resp.status_code == 200
    assert resp.get_json()["savedProject"]["isCompleted"] is True
    assert auth_client.patch(f"/saved-projects/{project_id}", json={"isCompleted": "x"}).status_code == 400

    stats = auth_client.get("/dashboard/stats").get_json()
    assert stats["savedProjects"] == 1
    assert stats["completedProjects"] == 1

    assert auth_client.delete(f"/saved-projects/{project_id}").status_code == 200
    assert auth_client.get("/saved-projects").get_json()["savedProjects"] == []


def test_unknown_route_is_json_404(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.get_json()["ok"] is False


# ---------------------------
# Non-object JSON bodies
# ---------------------------

def test_non_object_json_bodies_are_400(auth_client, client):
    _add_skill(auth_client, name="Python")
    path_id = auth_client.post("/careers/generate").get_json()["careerPaths"][0]["id"]
    step_id = auth_client.post(f"/careers/{path_id}/select").get_json()["roadmap"]["steps"][0]["id"]
    assert auth_client.patch(f"/roadmap-steps/{step_id}", json=[True]).status_code == 400
    assert auth_client.patch(f"/roadmap-steps/{step_id}", json="true").status_code == 400

    project_id = client.get("/projects").get_json()["projects"][0]["id"]
    course_id = client.get("/courses").get_json()["courses"][0]["id"]
    assert auth_client.post("/saved-projects", json=[project_id]).status_code == 400
    assert auth_client.post("/saved-courses", json=[course_id]).status_code == 400
    assert auth_client.post("/saved-projects", json={"projectId": project_id}).status_code == 201
    assert auth_client.patch(f"/saved-projects/{project_id}", json=[True]).status_code == 400

    assert auth_client.post("/skills", json=["Go"]).status_code == 400
    assert auth_client.post("/auth/register", json=["x"]).status_code == 400
    assert auth_client.post("/auth/login", json=42).status_code == 401

    # nothing to change, profile comes back as-is
    resp = auth_client.patch("/auth/me", json=["name"])
    assert resp.status_code == 200
    assert resp.get_json()["user"]["name"] == "Ada"
