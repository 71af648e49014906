# src/dev_metrics/config/settings.py
"""Settings and environment variables for the developer metrics pipeline."""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

DEFAULT_CONFIG_FILE = "config.yml"


class CollectOptions(BaseModel):
    """Which record kinds the fetcher collects."""

    commits: bool = True
    pull_requests: bool = True
    issues: bool = True
    releases: bool = True
    # One extra request per PR
    code_reviews: bool = False
    # One extra request per commit and per PR for diff stats
    code_frequency: bool = False


class MetricsOptions(BaseModel):
    lookback_days: int = 90
    top_languages: int = 8
    max_listed_items: int = 500
    failure_label_pattern: str = r"bug|incident|hotfix"
    collect: CollectOptions = Field(default_factory=CollectOptions)

    @field_validator("lookback_days")
    @classmethod
    def check_lookback(cls, value: int) -> int:
        if value < 1:
            raise ValueError("lookback_days must be at least 1")
        return value

    @field_validator("top_languages")
    @classmethod
    def check_top_languages(cls, value: int) -> int:
        if not 1 <= value <= 20:
            raise ValueError("top_languages must be between 1 and 20")
        return value

    @field_validator("failure_label_pattern")
    @classmethod
    def check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid failure_label_pattern: {exc}") from exc
        return value


class ReadmeOptions(BaseModel):
    chart_width: int = 840
    dashboard_url: str = ""


class Settings(BaseSettings):
    """Application settings."""

    github_token: str = ""
    owner: str = Field(default="", validation_alias=AliasChoices("owner", "github_owner"))
    # Empty list means auto-discover the owner's most recently updated repositories
    repositories: List[str] = Field(default_factory=list)
    auto_discover_limit: int = 10
    data_dir: str = "data"
    max_retries: int = 3
    metrics: MetricsOptions = Field(default_factory=MetricsOptions)
    readme: ReadmeOptions = Field(default_factory=ReadmeOptions)

    model_config = SettingsConfigDict(
        env_file=".env", env_nested_delimiter="__", extra="ignore", populate_by_name=True
    )

    @field_validator("repositories", mode="before")
    @classmethod
    def parse_repositories(cls, value: Any) -> Any:
        """Accept a comma separated string as well as a list."""
        if value is None:
            return []
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @property
    def metrics_file(self) -> Path:
        return Path(self.data_dir) / "metrics.json"

    @property
    def records_file(self) -> Path:
        return Path(self.data_dir) / "records.json"


def load_config_file(path: Optional[str | Path]) -> Dict[str, Any]:
    """Read the YAML config file, returning {} when it does not exist."""
    if path is None:
        return {}
    path = Path(path)
    if not path.is_file():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return data


def get_settings(config_file: Optional[str | Path] = DEFAULT_CONFIG_FILE) -> Settings:
    """Get the application settings.

    Values in the YAML config file take precedence over environment variables;
    secrets such as GITHUB_TOKEN belong in the environment or .env.
    """
    return Settings(**load_config_file(config_file))
