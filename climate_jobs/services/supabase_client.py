import time
from typing import Any, Optional

from supabase import create_client, Client

from climate_jobs.utils.config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, MEDIA_BUCKET
from climate_jobs.utils.exceptions import ConfigurationError
from climate_jobs.utils.logger import get_logger


logger = get_logger("supabase-client")


_client: Optional[Client] = None


def is_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY)


def supabase() -> Client:
    global _client
    if _client:
        return _client
    if not is_configured():
        raise ConfigurationError("Supabase not configured: set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
    _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    return _client


def current_user_id(access_token: str | None) -> str | None:
    """Resolve the user behind a Supabase access token; None when the token is missing or rejected."""
    if not access_token:
        return None
    try:
        res = supabase().auth.get_user(access_token)
    except ConfigurationError:
        raise
    except Exception as e:
        logger.warning("Supabase auth rejected token: %s", e)
        return None
    user = getattr(res, "user", None)
    return getattr(user, "id", None)


def insert_row(table: str, row: dict[str, Any] | list[dict[str, Any]]) -> list[dict[str, Any]]:
    try:
        res = supabase().table(table).insert(row).execute()
    except Exception as e:
        logger.error("Supabase insert into %s failed: %s", table, e)
        raise
    return res.data or []


def select_rows(table: str, match: dict[str, Any], columns: str = "*") -> list[dict[str, Any]]:
    q = supabase().table(table).select(columns)
    for k, v in match.items():
        q = q.eq(k, v)
    try:
        res = q.execute()
    except Exception as e:
        logger.error("Supabase select from %s failed: %s", table, e)
        raise
    return res.data or []


class SupabaseWorkStore:
    """Media upload and record insert for work submissions."""

    table = "micro_jobs"

    def __init__(self, bucket: str = MEDIA_BUCKET):
        self.bucket = bucket

    def upload_media(self, user_id: str, data: bytes, extension: str, content_type: str) -> str:
        path = f"{user_id}/{int(time.time() * 1000)}.{extension}"
        storage = supabase().storage.from_(self.bucket)
        try:
            storage.upload(path, data, {"content-type": content_type})
        except Exception as e:
            logger.error("Upload to %s/%s failed: %s", self.bucket, path, e)
            raise
        logger.info("Uploaded proof media → %s/%s (%d bytes)", self.bucket, path, len(data))
        return storage.get_public_url(path)

    def insert_work(self, row: dict[str, Any]) -> str:
        rows = insert_row(self.table, row)
        if not rows or "id" not in rows[0]:
            raise RuntimeError(f"insert into {self.table} returned no id")
        return str(rows[0]["id"])
