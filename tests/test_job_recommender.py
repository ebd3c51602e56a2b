import json

from climate_jobs.routes import jobs as jobs_route
from climate_jobs.services.job_recommender import keyword_rankings, recommend_jobs


JOBS = [
    {"id": "a", "title": "Install rooftop solar", "skills": ["Solar", "Electrical"], "difficulty": "hard", "type": "field"},
    {"id": "b", "title": "Tree census", "skills": ["Botany"], "difficulty": "easy", "type": "field"},
    {"id": "c", "title": "Energy audit report", "skills": ["Energy Auditing", "Writing"], "difficulty": "medium", "type": "remote"},
]


def test_no_skills_scores_everything_zero():
    ranked = recommend_jobs("u1", JOBS, chat=lambda *a, **kw: "unused", skills=[])
    assert [j["recommendationScore"] for j in ranked] == [0, 0, 0]
    assert [j["id"] for j in ranked] == ["a", "b", "c"]


def test_llm_ranking_with_omitted_jobs_appended():
    reply = json.dumps([
        {"jobIndex": 2, "score": 92, "matchedSkills": ["writing"]},
        {"jobIndex": 0, "score": 70, "matchedSkills": ["solar"]},
        {"jobIndex": 9, "score": 99, "matchedSkills": []},
    ])
    ranked = recommend_jobs("u1", JOBS, chat=lambda *a, **kw: reply, skills=["writing", "solar"])

    assert [j["id"] for j in ranked] == ["c", "a", "b"]
    assert ranked[0]["recommendationScore"] == 92
    assert ranked[-1]["recommendationScore"] == 10
    assert ranked[-1]["matchedSkills"] == []


def test_unparseable_ranking_falls_back_to_keywords():
    ranked = recommend_jobs("u1", JOBS, chat=lambda *a, **kw: "no idea", skills=["solar", "electrical"])

    assert ranked[0]["id"] == "a"
    assert ranked[0]["recommendationScore"] == 80
    assert ranked[0]["matchedSkills"] == ["solar", "electrical"]
    assert {j["recommendationScore"] for j in ranked[1:]} == {20}


def test_keyword_rankings_partial_overlap():
    rankings = keyword_rankings(JOBS, ["energy"])
    assert rankings[0].jobIndex == 2
    assert rankings[0].matchedSkills == ["energy auditing"]
    assert rankings[0].score == 65


def test_route_requires_user(client):
    resp = client.post("/api/jobs/recommend", json={"jobs": JOBS})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "User ID is required"}


def test_route_skill_lookup_failure(client, monkeypatch):
    def broken(user_id):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(jobs_route, "user_skills", broken)

    resp = client.post("/api/jobs/recommend", json={"userId": "u1", "jobs": JOBS})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to fetch user skills"}


def test_route_without_skills(client, monkeypatch):
    monkeypatch.setattr(jobs_route, "user_skills", lambda user_id: [])

    resp = client.post("/api/jobs/recommend", json={"userId": "u1", "jobs": JOBS})
    assert resp.status_code == 200
    assert [j["recommendationScore"] for j in resp.get_json()["jobs"]] == [0, 0, 0]


def test_route_array_body(client):
    resp = client.post("/api/jobs/recommend", json=[{"userId": "u1"}])
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "User ID is required"}
