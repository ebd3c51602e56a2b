from typing import Any, Callable, Optional

from pydantic import ValidationError as SchemaError

from climate_jobs.models.quiz_schema import JobRanking
from climate_jobs.services import llm_client, supabase_client
from climate_jobs.utils.logger import get_logger


logger = get_logger("job-recommender")

SYSTEM_PROMPT = "You are a job matching expert. Return only valid JSON arrays."

RANK_PROMPT = """You are a job matching expert. Match these jobs with user skills and rank them.

User Skills: %(skills)s

Available Jobs:
%(jobs)s

Analyze skill matches, considering:
- Direct skill matches (highest priority)
- Related/transferable skills
- Job difficulty vs user experience level
- Job type alignment

Return ONLY a JSON array of objects with this exact format:
[
  {"jobIndex": 0, "score": 95, "matchedSkills": ["skill1", "skill2"]},
  {"jobIndex": 1, "score": 85, "matchedSkills": ["skill1"]}
]

Score from 0-100. Sort by score descending."""

UNRANKED_SCORE = 10


def user_skills(user_id: str) -> list[str]:
    rows = supabase_client.select_rows("user_skills", {"user_id": user_id}, columns="skill_name")
    return [str(r["skill_name"]).lower() for r in rows if r.get("skill_name")]


def describe_jobs(jobs: list[dict[str, Any]]) -> str:
    return "\n".join(
        f"{i}. {job.get('title')} - Required Skills: {', '.join(job.get('skills') or [])}"
        f" - Difficulty: {job.get('difficulty')} - Type: {job.get('type')}"
        for i, job in enumerate(jobs)
    )


def keyword_rankings(jobs: list[dict[str, Any]], skills: list[str]) -> list[JobRanking]:
    """Substring skill overlap; used when the model's ranking cannot be parsed."""
    rankings = []
    for i, job in enumerate(jobs):
        job_skills = [str(s).lower() for s in job.get("skills") or []]
        matched = [s for s in job_skills if any(s in us or us in s for us in skills)]
        score = 50 + len(matched) * 15 if matched else 20
        rankings.append(JobRanking(jobIndex=i, score=score, matchedSkills=matched))
    return sorted(rankings, key=lambda r: r.score, reverse=True)


def llm_rankings(jobs: list[dict[str, Any]], skills: list[str], chat: Callable[..., str]) -> list[JobRanking]:
    prompt = RANK_PROMPT % {"skills": ", ".join(skills), "jobs": describe_jobs(jobs)}
    text = chat(SYSTEM_PROMPT, prompt, temperature=0.3)
    logger.debug("AI analysis: %s", text)
    try:
        return [JobRanking.model_validate(r) for r in llm_client.extract_json_array(text)]
    except (ValueError, SchemaError) as e:
        logger.warning("Failed to parse rankings, falling back to keyword matching: %s", e)
        return keyword_rankings(jobs, skills)


def recommend_jobs(
    user_id: str,
    jobs: list[dict[str, Any]],
    chat: Optional[Callable[..., str]] = None,
    skills: Optional[list[str]] = None,
) -> list[dict[str, Any]]:
    """Jobs ordered by recommendation, each with recommendationScore and matchedSkills."""
    skills = user_skills(user_id) if skills is None else skills
    logger.info("Ranking %d jobs for %s (%d skills)", len(jobs), user_id, len(skills))
    if not skills:
        return [{**job, "recommendationScore": 0, "matchedSkills": []} for job in jobs]

    rankings = llm_rankings(jobs, skills, chat or llm_client.chat)

    ranked, seen = [], set()
    for r in rankings:
        if not 0 <= r.jobIndex < len(jobs) or r.jobIndex in seen:
            continue
        seen.add(r.jobIndex)
        ranked.append({**jobs[r.jobIndex], "recommendationScore": r.score, "matchedSkills": r.matchedSkills})

    for i, job in enumerate(jobs):
        if i not in seen:
            ranked.append({**job, "recommendationScore": UNRANKED_SCORE, "matchedSkills": []})
    return ranked
