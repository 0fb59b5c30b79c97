import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger("api")

DEFAULT_OPENAI_URL = 'https://api.openai.com/v1/chat/completions'
DEFAULT_OPENAI_MODEL = 'gpt-4o-mini'


def _split_origins(raw: str) -> tuple:
    return tuple(s.strip() for s in (raw or '').split(',') if s.strip())


def _env_float(environ, name: str, default):
    raw = (environ.get(name) or '').strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number); using %s", name, raw, default)
        return default


def _env_int(environ, name: str, default: int) -> int:
    raw = (environ.get(name) or '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer); using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup and passed down explicitly."""

    allow_origins: tuple = field(default_factory=tuple)
    openai_api_key: str = ''
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_temperature: float = 0.45
    openai_max_tokens: int = 700
    openai_url: str = DEFAULT_OPENAI_URL
    openai_timeout: float | None = None
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            allow_origins=_split_origins(env.get('ALLOW_ORIGINS', '')),
            openai_api_key=(env.get('OPENAI_API_KEY') or '').strip(),
            openai_model=(env.get('OPENAI_MODEL') or DEFAULT_OPENAI_MODEL).strip(),
            openai_temperature=_env_float(env, 'OPENAI_TEMPERATURE', 0.45),
            openai_max_tokens=_env_int(env, 'OPENAI_MAX_TOKENS', 700),
            openai_url=(env.get('OPENAI_API_URL') or DEFAULT_OPENAI_URL).strip(),
            openai_timeout=_env_float(env, 'OPENAI_TIMEOUT', None),
            log_level=(env.get('LOG_LEVEL') or 'INFO').strip().upper(),
        )


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)
