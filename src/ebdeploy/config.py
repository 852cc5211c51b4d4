"""Configuration management for ebdeploy using Pydantic."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from ebdeploy.core.exceptions import ConfigError
from ebdeploy.core.logging import LogLevel
from ebdeploy.core.output import OutputFormat


class AWSConfig(BaseModel):
    """AWS configuration."""

    profile: str | None = None
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    endpoint_url: str | None = None

    def get_profile(self) -> str | None:
        """Get AWS profile from config or environment."""
        return (
            os.environ.get("EBDEPLOY_AWS_PROFILE")
            or os.environ.get("AWS_PROFILE")
            or self.profile
        )

    def get_region(self) -> str | None:
        """Get AWS region from config or environment."""
        return (
            os.environ.get("EBDEPLOY_AWS_REGION")
            or os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
            or self.region
        )


class SmokeTestConfig(BaseModel):
    """Post-deploy smoke test against the environment's hostname."""

    model_config = {"frozen": True}

    path: str = "/"
    protocol: str = "http"
    timeout: float = Field(default=10, gt=0)  # seconds
    expected_status: int = Field(default=200, ge=100, le=599)

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        v = v.lower()
        if v not in ("http", "https"):
            raise ValueError("protocol must be 'http' or 'https'")
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("path must start with '/'")
        return v


class EnvironmentConfig(BaseModel):
    """Deploy target configuration."""

    solution_stack: str | None = None
    cname_prefix: str | None = None
    phoenix_mode: bool = False
    strategy: str = "inplace-update"
    smoke_test: SmokeTestConfig | None = None
    option_settings: dict[str, Any] = Field(default_factory=dict)

    @field_validator("strategy")
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        if v not in ("inplace-update", "blue-green"):
            raise ValueError("strategy must be 'inplace-update' or 'blue-green'")
        return v


class GlobalConfig(BaseModel):
    """Global settings."""

    output_format: OutputFormat = OutputFormat.TABLE
    color: str = "auto"  # auto, always, never
    verbosity: LogLevel = LogLevel.INFO
    confirm_destructive: bool = True
    health_timeout: int = 600  # seconds
    health_interval: int = 15  # seconds
    event_poll_interval: int = 10  # seconds
    event_timeout: int | None = None  # seconds, unbounded when unset

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if v not in ("auto", "always", "never"):
            raise ValueError("color must be 'auto', 'always', or 'never'")
        return v


class EbDeployConfig(BaseModel):
    """Main configuration model."""

    model_config = {"populate_by_name": True}

    version: str = "1"
    application: str | None = None
    aws: AWSConfig = Field(default_factory=AWSConfig)
    global_settings: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    environments: dict[str, EnvironmentConfig] = Field(default_factory=dict)

    def get_application(self) -> str:
        """Get application name from environment or config."""
        app = os.environ.get("EBDEPLOY_APPLICATION") or self.application
        if not app:
            raise ConfigError("Application name not configured")
        return app

    def get_environment(self, name: str) -> EnvironmentConfig:
        """Get an environment by name."""
        if name not in self.environments:
            raise ConfigError(
                f"Environment '{name}' not found",
                details={"available": sorted(self.environments)},
            )
        return self.environments[name]


class ConfigLoader:
    """Loads and merges configuration from multiple sources.

    Sources, lowest priority first: the user file, the nearest project file
    found walking up from the working directory, then an explicit file.
    Mappings are merged key by key; any other value replaces what came before.
    """

    CONFIG_FILENAMES = ["ebdeploy.yaml", "ebdeploy.yml", ".ebdeploy.yaml", ".ebdeploy.yml"]

    @staticmethod
    def user_config_path() -> Path:
        return Path.home() / ".ebdeploy" / "config.yaml"

    def load(self, config_file: str | Path | None = None) -> EbDeployConfig:
        merged: dict[str, Any] = {}
        for path in self._sources(config_file):
            merged = self._deep_merge(merged, self._load_yaml_file(path))

        try:
            return EbDeployConfig(**merged)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}")

    def _sources(self, config_file: str | Path | None) -> list[Path]:
        sources = [p for p in (self.user_config_path(), self._find_project_config()) if p and p.is_file()]

        if config_file:
            explicit = Path(config_file)
            if not explicit.is_file():
                raise ConfigError(f"Config file not found: {config_file}")
            sources.append(explicit)

        return sources

    def _find_project_config(self) -> Path | None:
        for directory in (Path.cwd(), *Path.cwd().parents):
            for filename in self.CONFIG_FILENAMES:
                candidate = directory / filename
                if candidate.is_file():
                    return candidate
        return None

    def _load_yaml_file(self, path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration in {path}: expected a mapping at the top level")
        return data

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        result = dict(base)
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def load_config(config_file: str | Path | None = None) -> EbDeployConfig:
    """Load ebdeploy configuration from the user, project and explicit files."""
    return ConfigLoader().load(config_file)


def get_default_config() -> EbDeployConfig:
    """Get default configuration without loading from files."""
    return EbDeployConfig()
