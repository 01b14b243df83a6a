"""Application settings, CORS configuration and mail transport settings."""

import json
import os
from dataclasses import dataclass
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Port on which the mail provider expects TLS from the first byte.
IMPLICIT_TLS_PORT = 465


@dataclass(frozen=True, slots=True)
class MailTransportConfig:
    """Complete, immutable SMTP submission settings."""

    host: str
    port: int
    username: str
    password: str
    from_address: str

    @property
    def implicit_tls(self) -> bool:
        return self.port == IMPLICIT_TLS_PORT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env"), env_file_encoding="utf-8", frozen=True
    )

    # App
    APP_NAME: str = "AI Email Assistant"
    ENVIRONMENT: str = "development"  # development | production | test

    # CORS
    # Accept list or CSV/JSON string from env; normalized to list[str] by validators
    CORS_ORIGINS: list[str] | str = [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]
    ALLOW_CREDENTIALS: bool = True

    # Language-model provider (OpenAI-compatible chat completions endpoint)
    GROQ_API_KEY: str | None = None
    GROQ_API_URL: str = "https://api.groq.com/openai/v1/chat/completions"
    GROQ_MODEL: str = "llama3-70b-8192"
    GROQ_TEMPERATURE: float = 0.7
    GROQ_MAX_TOKENS: int = 1024

    # Outbound mail transport
    SMTP_HOST: str | None = None
    SMTP_PORT: int = IMPLICIT_TLS_PORT
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    FROM_EMAIL: str | None = None

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: object) -> list[str]:
        """Allow list, CSV string, or JSON array string for CORS origins."""
        if isinstance(v, list):
            return [str(i).strip() for i in v]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError as e:
                    raise ValueError(
                        "CORS_ORIGINS must be a CSV list or JSON array string"
                    ) from e
                if not isinstance(parsed, list):
                    raise ValueError("CORS_ORIGINS JSON must be a list")
                return [str(i).strip() for i in parsed]
            # CSV fallback
            return [i.strip() for i in s.split(",") if i.strip()]
        raise ValueError("Invalid CORS_ORIGINS type; expected str or list[str]")

    @field_validator(
        "GROQ_API_KEY", "SMTP_HOST", "SMTP_USER", "SMTP_PASS", "FROM_EMAIL"
    )
    @classmethod
    def _blank_as_missing(cls, v: str | None) -> str | None:
        """Treat empty strings from the environment as unset."""
        if v is None or not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _validate_cors_credentials(self) -> "Settings":
        """Ensure wildcard origins are not used when credentials are allowed."""
        origins = self.CORS_ORIGINS
        if isinstance(origins, str):
            origins = self.assemble_cors_origins(origins)
        if self.ALLOW_CREDENTIALS and any(o.strip() == "*" for o in origins or []):
            raise ValueError(
                "CORS configuration error: ALLOW_CREDENTIALS=True but "
                "CORS_ORIGINS contains '*'. Use explicit origins when credentials "
                "are allowed."
            )
        return self

    @property
    def sender_address(self) -> str | None:
        return self.FROM_EMAIL or self.SMTP_USER

    def mail_transport(self) -> MailTransportConfig | None:
        """Return the SMTP settings, or None if any required value is missing."""
        from_address = self.sender_address
        if not (self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASS and from_address):
            return None
        return MailTransportConfig(
            host=self.SMTP_HOST,
            port=self.SMTP_PORT,
            username=self.SMTP_USER,
            password=self.SMTP_PASS,
            from_address=from_address,
        )

    def mail_config_diagnostics(self) -> dict[str, bool | str]:
        """Presence map of the mail settings that never includes the secret."""
        return {
            "host_set": bool(self.SMTP_HOST),
            "user_set": bool(self.SMTP_USER),
            "smtp_pass": "****" if self.SMTP_PASS else "MISSING",
            "from_set": bool(self.sender_address),
        }


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env not in {"development", "production", "test"}:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")

    if env == "production":
        env_file = ".env.prod"
    elif env == "development":
        env_file = ".env.dev"
    else:
        # test environment - no env file needed, use defaults
        env_file = ""
    if env_file and not os.path.exists(env_file):
        env_file = ""

    # The Settings initializer accepts a runtime-only `_env_file` kwarg used by
    # pydantic-settings; mypy's stub doesn't allow this call argument.
    return Settings(_env_file=env_file or None)  # type: ignore[call-arg]
