from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from tools.logging_config import get_logger
from tools.til import CONFIG_PATH

logger = get_logger(__name__)


# =============================================================================
# TilConfig (args/til.yaml)
# =============================================================================

class SuggestionConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_suggestions: int = Field(default=4, ge=0)
    set_goal_min_entries: int = Field(default=3, ge=0)
    almost_there_percent: int = Field(default=80, ge=0, le=100)
    deadline_window_days: int = Field(default=7, ge=1)
    milestone_streak_days: int = Field(default=7, ge=1)
    diversify_share: float = Field(default=0.5, ge=0.0, le=1.0)
    diversify_min_entries: int = Field(default=5, ge=0)
    review_age_days: int = Field(default=14, ge=1)
    review_min_entries: int = Field(default=5, ge=0)
    review_quote_length: int = Field(default=80, ge=1)
    consistency_min_entries: int = Field(default=14, ge=0)
    top_tags_scan: int = Field(default=10, ge=1)


class AnalyticsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    daily_window_days: int = Field(default=28, ge=1)
    weekly_window_weeks: int = Field(default=4, ge=1)
    monthly_window_months: int = Field(default=3, ge=1)
    top_tags_limit: int = Field(default=5, ge=0)
    summary_top_tags_limit: int = Field(default=10, ge=0)
    default_goal_target: int = Field(default=10, ge=1)


class TilConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    suggestions: SuggestionConfig = Field(default_factory=SuggestionConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)


def load_config(path: Path | None = None) -> TilConfig:
    yaml_path = Path(path) if path is not None else CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return TilConfig.model_validate(raw.get("til", {}) or {})
    except Exception as e:
        logger.warning("config_invalid", path=str(yaml_path), error=str(e))
        return TilConfig()
