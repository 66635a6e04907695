import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Ordered; the scan stops at the first model that answers.
DEFAULT_MODEL_CANDIDATES = (
    "gemini-1.5-flash",
    "gemini-1.5-flash-latest",
    "gemini-1.5-flash-001",
    "gemini-1.5-flash-8b",
    "gemini-1.5-pro",
)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_models(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    models = tuple(m.strip() for m in raw.split(",") if m.strip())
    return models or DEFAULT_MODEL_CANDIDATES


class Settings(BaseModel):
    google_api_key: str = ""
    base_url: str = GEMINI_BASE_URL
    strategy: str = "scan"  # scan | fixed | discover
    model_candidates: tuple[str, ...] = DEFAULT_MODEL_CANDIDATES
    default_model: str = "gemini-1.5-flash"
    max_output_tokens: int = 4096
    temperature: float = 0.7
    include_category: bool = True
    request_timeout: int = 60
    debug_preview_chars: int = 100
    error_preview_chars: int = 300
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            google_api_key=os.getenv("GOOGLE_API_KEY", ""),
            base_url=os.getenv("GEMINI_BASE_URL", GEMINI_BASE_URL),
            strategy=os.getenv("GENERATION_STRATEGY", "scan").strip().lower(),
            model_candidates=_env_models("GEMINI_MODELS"),
            default_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
            max_output_tokens=int(os.getenv("MAX_OUTPUT_TOKENS", "4096")),
            temperature=float(os.getenv("TEMPERATURE", "0.7")),
            include_category=_env_bool("INCLUDE_CATEGORY", "true"),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", "60")),
            debug_preview_chars=int(os.getenv("DEBUG_PREVIEW_CHARS", "100")),
            error_preview_chars=int(os.getenv("ERROR_PREVIEW_CHARS", "300")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
