"""
Service configuration loaded from TWAI_* environment variables.

A `.env` file in the working directory is honoured through python-dotenv.
"""

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class ConfigError(Exception):
    """One or more configuration problems, reported together."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class Settings(BaseModel):
    port: int = 0
    log_level: str = "info"
    teamwork_server: str
    teamwork_api_token: str
    agentic_name: str
    agentic_dsn: str = ""

    @property
    def logging_level(self) -> int:
        return LOG_LEVELS[self.log_level]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the environment.

        Every problem found is collected and raised at once as ConfigError.
        """
        env = os.environ if environ is None else environ
        errors = []

        port = 0
        port_str = env.get("TWAI_PORT", "").strip()
        if port_str:
            try:
                port = int(port_str)
            except ValueError:
                errors.append(f"failed to parse TWAI_PORT: invalid integer {port_str!r}")
            else:
                if not 0 <= port <= 65535:
                    errors.append(f"failed to parse TWAI_PORT: {port} out of range")

        log_level = env.get("TWAI_LOG_LEVEL", "").strip().lower() or "info"
        if log_level not in LOG_LEVELS:
            errors.append(
                f"failed to parse TWAI_LOG_LEVEL: unknown level {log_level!r} "
                f"(expected debug, info, warn or error)"
            )

        teamwork_server = env.get("TWAI_TEAMWORK_SERVER", "").strip()
        if not teamwork_server:
            errors.append("missing TWAI_TEAMWORK_SERVER")
        elif not teamwork_server.startswith(("http://", "https://")):
            errors.append(f"invalid TWAI_TEAMWORK_SERVER: {teamwork_server!r} is not an http(s) URL")

        teamwork_api_token = env.get("TWAI_TEAMWORK_API_TOKEN", "").strip()
        if not teamwork_api_token:
            errors.append("missing TWAI_TEAMWORK_API_TOKEN")

        agentic_name = env.get("TWAI_AGENTIC_NAME", "").strip()
        if not agentic_name:
            errors.append("missing TWAI_AGENTIC_NAME")

        if errors:
            raise ConfigError(errors)

        return cls(
            port=port,
            log_level=log_level,
            teamwork_server=teamwork_server,
            teamwork_api_token=teamwork_api_token,
            agentic_name=agentic_name,
            agentic_dsn=env.get("TWAI_AGENTIC_DSN", "").strip(),
        )


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
