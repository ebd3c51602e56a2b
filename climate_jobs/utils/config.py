import os
from dotenv import load_dotenv

load_dotenv(override=False)


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v not in (None, "", "null", "None") else default


SUPABASE_URL = _env("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = _env("SUPABASE_SERVICE_ROLE_KEY")
MEDIA_BUCKET = _env("MEDIA_BUCKET", "micro-job-media")


# Handwritten before printed, large before base.
DEFAULT_OCR_MODELS = (
    "microsoft/trocr-large-handwritten",
    "microsoft/trocr-base-handwritten",
    "microsoft/trocr-large-printed",
    "microsoft/trocr-base-printed",
)

HF_API_URL = _env("HF_API_URL", "https://api-inference.huggingface.co")
HF_API_TOKEN = _env("HF_API_TOKEN")
OCR_MODELS = tuple(
    m.strip() for m in (_env("OCR_MODELS") or ",".join(DEFAULT_OCR_MODELS)).split(",") if m.strip()
)
OCR_TIMEOUT_SECONDS = float(_env("OCR_TIMEOUT_SECONDS", "60") or "60")
MAX_PROOF_BYTES = int(_env("MAX_PROOF_BYTES", str(10 * 1024 * 1024)) or 10 * 1024 * 1024)


GROQ_API_URL = _env("GROQ_API_URL", "https://api.groq.com/openai/v1")
GROQ_API_KEY = _env("GROQ_API_KEY")
GROQ_MODEL = _env("GROQ_MODEL", "llama-3.3-70b-versatile")


HOST = _env("HOST", "0.0.0.0")
PORT = int(_env("PORT", "8080") or "8080")
FLASK_ENV = _env("FLASK_ENV", "production")
