from appforge.core.config import Settings
from appforge.core.errors import ConfigurationError


def require_google_key(settings: Settings) -> str:
    key = settings.google_api_key
    if not key or not key.strip():
        raise ConfigurationError()
    return key.strip()


def key_status(settings: Settings) -> str:
    key = settings.google_api_key
    return "configured" if (key and key.strip()) else "missing_key"
