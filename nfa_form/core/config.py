"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TEMPLATE_PATH = (
    "static/f_5320.23_national_firearms_act_nfa_responsible_person_questionnaire.pdf"
)
DEFAULT_OUTPUT_FILENAME = "5320.23.pdf"


@dataclass(frozen=True)
class LoggingConfig:
    """Structured logging configuration."""

    level: str


@dataclass(frozen=True)
class SecurityConfig:
    """API perimeter security settings."""

    cors_allowed_origins: list[str]
    request_max_bytes: int


@dataclass(frozen=True)
class TemplateConfig:
    """Location of the questionnaire PDF template and output naming."""

    path: Path
    url: str
    fetch_timeout_seconds: int
    output_filename: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    logging: LoggingConfig
    security: SecurityConfig
    template: TemplateConfig

    @staticmethod
    def from_env() -> "AppConfig":
        """Build app config from process environment."""
        log_level = os.getenv("LOG_LEVEL", "INFO").strip() or "INFO"
        cors_allowed_origins = [
            origin.strip()
            for origin in os.getenv(
                "CORS_ALLOWED_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if origin.strip()
        ]
        request_max_bytes = int(os.getenv("REQUEST_MAX_BYTES", str(1024 * 1024)))
        template_path = (
            os.getenv("TEMPLATE_PATH", DEFAULT_TEMPLATE_PATH).strip()
            or DEFAULT_TEMPLATE_PATH
        )
        template_url = os.getenv("TEMPLATE_URL", "").strip()
        fetch_timeout = int(os.getenv("TEMPLATE_FETCH_TIMEOUT_SECONDS", "20"))
        output_filename = (
            os.getenv("OUTPUT_FILENAME", DEFAULT_OUTPUT_FILENAME).strip()
            or DEFAULT_OUTPUT_FILENAME
        )

        return AppConfig(
            logging=LoggingConfig(level=log_level),
            security=SecurityConfig(
                cors_allowed_origins=cors_allowed_origins,
                request_max_bytes=request_max_bytes,
            ),
            template=TemplateConfig(
                path=Path(template_path),
                url=template_url,
                fetch_timeout_seconds=fetch_timeout,
                output_filename=output_filename,
            ),
        )
