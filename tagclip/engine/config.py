"""Configuration management for tagclip."""

import os
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator


DEFAULT_REGISTRY_ROOT = Path.home() / ".local" / "share" / "supertag" / "workspaces"


class RegistryConfig(BaseModel):
    workspace: str = "main"
    root: Path = DEFAULT_REGISTRY_ROOT
    filename: str = "schema-registry.json"

    @field_validator('root')
    @classmethod
    def expand_root(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @property
    def snapshot_path(self) -> Path:
        return self.root / self.workspace / self.filename


class TemplatesConfig(BaseModel):
    enabled: bool = True
    user_templates_path: Optional[Path] = None
    words_per_minute: int = 200
    date_format: str = "YYYY-MM-DD"

    @field_validator('words_per_minute')
    @classmethod
    def validate_wpm(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("words_per_minute must be positive")
        return v

    @field_validator('user_templates_path')
    @classmethod
    def expand_templates_path(cls, v: Optional[Path]) -> Optional[Path]:
        return Path(v).expanduser() if v is not None else None


class MappingConfig(BaseModel):
    default_tag: str = "bookmark"
    format_url_as_link: bool = False


class RankingConfig(BaseModel):
    min_score: int = 0
    limit: Optional[int] = None

    @field_validator('min_score')
    @classmethod
    def validate_min_score(cls, v: int) -> int:
        if v < 0:
            raise ValueError("min_score must be >= 0")
        return v

    @field_validator('limit')
    @classmethod
    def validate_limit(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("limit must be positive")
        return v


class Config(BaseModel):
    """Main configuration for tagclip."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    log_level: str = "INFO"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        An explicit path must exist. Without one the default locations are
        searched and built-in defaults are used when none of them exists.
        """
        if config_path is None:
            candidates = [
                Path("tagclip.yaml"),
                Path.home() / ".config" / "tagclip" / "config.yaml",
                Path("/etc/tagclip/config.yaml"),
            ]
            for candidate in candidates:
                if candidate.exists():
                    config_path = candidate
                    break
            else:
                logger.debug(f"No config file found in {[str(c) for c in candidates]}, using defaults")
                return cls._apply_env(cls())

        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        logger.info(f"Loading config from: {config_path}")
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return cls._apply_env(cls(**data))

    @staticmethod
    def _apply_env(config: "Config") -> "Config":
        workspace = os.environ.get("TAGCLIP_WORKSPACE")
        if workspace:
            config.registry.workspace = workspace
        return config

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False)
