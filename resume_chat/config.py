"""Application settings and environment loading utilities."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


def _load_dotenv() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


_load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {value!r}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be a number, got {value!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_str(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration derived from environment variables."""

    cv_dir: str = "public/cvs"
    resume_path: str = "public/resume.pdf"
    llm_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    llm_api_key: Optional[str] = None
    llm_model: str = "llama-3.3-70b-versatile"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 256
    llm_timeout_seconds: float = 25.0
    email_host: Optional[str] = None
    email_port: int = 587
    email_user: Optional[str] = None
    email_pass: Optional[str] = None
    email_sender_name: str = "MCP Server"
    email_verify_tls: bool = False
    max_upload_bytes: int = 10 * 1024 * 1024
    disable_thumbnail: bool = False
    rate_limit_window_seconds: int = 60
    rate_limit_chat: int = 20
    rate_limit_email: int = 10
    rate_limit_cv_list: int = 60
    rate_limit_cv_upload: int = 20
    rate_limit_max_clients: int = 10_000
    log_level: str = "INFO"

    @property
    def email_configured(self) -> bool:
        return bool(self.email_host and self.email_user and self.email_pass)

    @classmethod
    def from_env(cls) -> "Settings":
        production = (os.getenv("APP_ENV") or "").strip().lower() == "production"
        on_vercel = (os.getenv("VERCEL") or "").strip() == "1"

        return cls(
            cv_dir=_env_str("CV_DIR") or cls.cv_dir,
            resume_path=_env_str("RESUME_PATH") or cls.resume_path,
            llm_api_url=_env_str("LLM_API_URL") or cls.llm_api_url,
            llm_api_key=_env_str("LLM_API_KEY"),
            llm_model=_env_str("LLM_MODEL") or cls.llm_model,
            llm_temperature=_env_float("LLM_TEMPERATURE", cls.llm_temperature),
            llm_max_tokens=_env_int("LLM_MAX_TOKENS", cls.llm_max_tokens),
            llm_timeout_seconds=_env_float("LLM_TIMEOUT_SECONDS", cls.llm_timeout_seconds),
            email_host=_env_str("EMAIL_HOST"),
            email_port=_env_int("EMAIL_PORT", cls.email_port),
            email_user=_env_str("EMAIL_USER"),
            email_pass=_env_str("EMAIL_PASS"),
            email_sender_name=_env_str("EMAIL_SENDER_NAME") or cls.email_sender_name,
            email_verify_tls=_env_bool("EMAIL_VERIFY_TLS", production),
            max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", cls.max_upload_bytes),
            disable_thumbnail=_env_bool("DISABLE_THUMBNAIL", on_vercel),
            rate_limit_window_seconds=_env_int(
                "RATE_LIMIT_WINDOW_SECONDS", cls.rate_limit_window_seconds
            ),
            rate_limit_chat=_env_int("RATE_LIMIT_CHAT", cls.rate_limit_chat),
            rate_limit_email=_env_int("RATE_LIMIT_EMAIL", cls.rate_limit_email),
            rate_limit_cv_list=_env_int("RATE_LIMIT_CV_LIST", cls.rate_limit_cv_list),
            rate_limit_cv_upload=_env_int("RATE_LIMIT_CV_UPLOAD", cls.rate_limit_cv_upload),
            rate_limit_max_clients=_env_int("RATE_LIMIT_MAX_CLIENTS", cls.rate_limit_max_clients),
            log_level=(_env_str("LOG_LEVEL") or cls.log_level).upper(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings.from_env()
