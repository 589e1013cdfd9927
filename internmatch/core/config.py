"""Configuration models and YAML loader for the matching engine.

Every heuristic constant lives here as a named, overridable field.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


class ScoringConfig(BaseModel):
    """Weights and thresholds for the composite score (max 100)."""

    skills_weight: float = Field(default=40.0, ge=0.0)
    stipend_weight: float = Field(default=20.0, ge=0.0)
    location_weight: float = Field(default=15.0, ge=0.0)
    sector_weight: float = Field(default=10.0, ge=0.0)
    company_weight: float = Field(default=10.0, ge=0.0)
    uniqueness_weight: float = Field(default=5.0, ge=0.0)

    # Skills band
    skill_ratio_points: float = 28.0
    skill_similarity_points: float = 4.0
    perfect_match_bonus: float = 5.0
    perfect_match_min_required: int = Field(default=3, ge=1)
    breadth_bonus: float = 3.0
    breadth_min_matched: int = Field(default=4, ge=1)
    no_requirements_ratio: float = Field(default=0.5, ge=0.0, le=1.0)

    # Stipend band
    stipend_log_points: float = 16.0
    high_stipend_bonus: float = 4.0
    high_stipend_multiplier: float = Field(default=1.5, gt=0.0)

    # Location band
    neutral_proximity: float = Field(default=0.5, ge=0.0, le=1.0)

    # Sector band
    sector_high_demand_points: float = 6.0
    sector_moderate_points: float = 4.0
    sector_default_points: float = 2.0
    interest_match_bonus: float = 4.0

    # Company band
    company_top_points: float = 10.0
    company_mid_points: float = 7.0
    company_recognizable_points: float = 5.0
    company_default_points: float = 3.0
    startup_stipend_bonus: float = 2.0
    startup_stipend_multiplier: float = Field(default=1.2, gt=0.0)

    # Uniqueness band
    very_rare_frequency: int = Field(default=1, ge=1)
    very_rare_points: float = 2.0
    rare_frequency: int = Field(default=3, ge=1)
    rare_points: float = 1.0

    # Hard rejection
    min_stipend_ratio: float = Field(default=0.7, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def rare_thresholds_ordered(self) -> "ScoringConfig":
        if self.rare_frequency < self.very_rare_frequency:
            msg = "rare_frequency must be >= very_rare_frequency"
            raise ValueError(msg)
        return self


class DistanceBand(BaseModel):
    """Proximity assigned to distances up to ``max_km``."""

    max_km: float = Field(gt=0.0)
    proximity: float = Field(gt=0.0, le=1.0)


class DistanceConfig(BaseModel):
    """Proximity tiers used by the distance estimator (closer ⇒ higher)."""

    remote_proximity: float = Field(default=1.0, gt=0.0, le=1.0)
    same_city_proximity: float = Field(default=0.95, gt=0.0, le=1.0)
    unknown_proximity: float = Field(default=0.3, gt=0.0, le=1.0)
    far_proximity: float = Field(default=0.15, gt=0.0, le=1.0)
    bands: list[DistanceBand] = Field(
        default_factory=lambda: [
            DistanceBand(max_km=50, proximity=0.9),
            DistanceBand(max_km=200, proximity=0.75),
            DistanceBand(max_km=500, proximity=0.55),
            DistanceBand(max_km=1000, proximity=0.35),
        ],
    )

    @model_validator(mode="after")
    def bands_sorted(self) -> "DistanceConfig":
        self.bands.sort(key=lambda b: b.max_km)
        return self


class RankingConfig(BaseModel):
    """Bucketing thresholds for the ranker and the recommendation hint."""

    ratio_threshold: float = Field(default=0.15, ge=0.0, le=1.0)
    score_threshold: float = Field(default=3.0, ge=0.0)
    stipend_gap_threshold: int = Field(default=1000, ge=0)
    recommended_count: int = Field(default=3, ge=0)
    recommended_min_score: float = Field(default=60.0, ge=0.0, le=100.0)


class EngineConfig(BaseModel):
    """Top-level engine settings loaded from YAML."""

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    distance: DistanceConfig = Field(default_factory=DistanceConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EngineConfig":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
