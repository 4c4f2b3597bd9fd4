"""Runtime configuration for the Minecraft server bot."""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("Invalid configuration: " + ", ".join(problems))
        self.problems = problems


class Settings(BaseSettings):
    """Environment-driven runtime settings (``.env`` is read when present)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    telegram_token: SecretStr
    aws_instance_id: str
    aws_access_key_id: str
    aws_access_key_secret: SecretStr
    mc_host: str
    mc_port: int = Field(gt=0, lt=65536)

    aws_region: str = "ap-southeast-1"
    log_level: str = "INFO"
    message_max_age_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Inbound chat messages older than this are ignored.",
    )
    boot_grace_seconds: float = Field(default=10.0, gt=0)
    shutdown_grace_seconds: float = Field(default=30.0, gt=0)
    reboot_grace_seconds: float = Field(default=30.0, gt=0)
    instance_poll_interval_seconds: float = Field(default=5.0, gt=0)
    instance_poll_timeout_seconds: float = Field(default=120.0, gt=0)
    boot_settle_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Wait after the instance reports running before the server process is started.",
    )
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    telegram_poll_timeout_seconds: int = Field(default=30, ge=0)
    shutdown_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="How long a stopping bot waits for in-flight commands before cancelling them.",
    )

    def masked(self) -> dict[str, Any]:
        """Settings as a plain dict with secrets hidden."""
        return {
            name: "**********" if isinstance(value, SecretStr) else value
            for name, value in self.model_dump().items()
        }


def load_settings(**overrides: Any) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            name = ".".join(str(part) for part in error["loc"]).upper()
            problems.append(f"{name} is missing" if error["type"] == "missing" else f"{name}: {error['msg']}")
        raise ConfigurationError(problems) from exc
