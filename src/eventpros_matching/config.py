"""Centralised, injectable configuration for the contractor matching engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import MatchingConfigFile
from .domain.compatibility import DEFAULT_MAX_SERVICE_RADIUS_KM, DEFAULT_REFERENCE_REVIEW_COUNT
from .domain.ranking import DEFAULT_ALGORITHM


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class PositiveNumberEnvVarError(ValueError):
    """Raised when an environment variable must be a positive number."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive number.")


class ScoreRangeEnvVarError(ValueError):
    """Raised when an environment variable must be a score between 0 and 1."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a number between 0 and 1.")


@dataclass(frozen=True)
class MatchingConfig:
    """Immutable configuration object for matching runs.

    Load from environment with `MatchingConfig.from_env()` or construct directly for testing.
    """

    # Ranking
    ranking_algorithm: str = DEFAULT_ALGORITHM
    page_limit: int = 20
    min_score: float = 0.0

    # Weights
    weight_profiles_path: str = ""
    weight_profile: str = ""

    # Location
    service_areas_path: str = ""
    max_service_radius_km: float = DEFAULT_MAX_SERVICE_RADIUS_KM

    # Experience
    reference_review_count: int = DEFAULT_REFERENCE_REVIEW_COUNT

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            MatchingConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            ranking_algorithm=os.getenv("MATCHING_ALGORITHM", DEFAULT_ALGORITHM).strip().lower()
            or DEFAULT_ALGORITHM,
            page_limit=_parse_positive_int(
                os.getenv("MATCHING_PAGE_LIMIT", ""), default=20, env_name="MATCHING_PAGE_LIMIT"
            ),
            min_score=_parse_score(
                os.getenv("MATCHING_MIN_SCORE", ""), env_name="MATCHING_MIN_SCORE"
            ),
            weight_profiles_path=os.getenv("WEIGHT_PROFILES_PATH", "").strip(),
            weight_profile=os.getenv("WEIGHT_PROFILE", "").strip(),
            service_areas_path=os.getenv("SERVICE_AREAS_PATH", "").strip(),
            max_service_radius_km=_parse_positive_float(
                os.getenv("MAX_SERVICE_RADIUS_KM", ""),
                default=DEFAULT_MAX_SERVICE_RADIUS_KM,
                env_name="MAX_SERVICE_RADIUS_KM",
            ),
            reference_review_count=_parse_positive_int(
                os.getenv("REFERENCE_REVIEW_COUNT", ""),
                default=DEFAULT_REFERENCE_REVIEW_COUNT,
                env_name="REFERENCE_REVIEW_COUNT",
            ),
        )

    def with_overrides(
        self,
        *,
        ranking_algorithm: str | None = None,
        page_limit: int | None = None,
        min_score: float | None = None,
        weight_profile: str | None = None,
        service_areas_path: str | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            ranking_algorithm=self.ranking_algorithm
            if ranking_algorithm is None
            else ranking_algorithm.strip().lower(),
            page_limit=self.page_limit if page_limit is None else page_limit,
            min_score=self.min_score if min_score is None else min_score,
            weight_profile=self.weight_profile
            if weight_profile is None
            else weight_profile.strip(),
            service_areas_path=self.service_areas_path
            if service_areas_path is None
            else service_areas_path.strip(),
        )

    def with_file_overrides(self, file_config: MatchingConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            ranking_algorithm=self.ranking_algorithm
            if file_config.ranking_algorithm is None
            else file_config.ranking_algorithm.lower(),
            page_limit=self.page_limit
            if file_config.page_limit is None
            else file_config.page_limit,
            min_score=self.min_score if file_config.min_score is None else file_config.min_score,
            weight_profiles_path=self.weight_profiles_path
            if file_config.weight_profiles_path is None
            else file_config.weight_profiles_path,
            weight_profile=self.weight_profile
            if file_config.weight_profile is None
            else file_config.weight_profile,
            service_areas_path=self.service_areas_path
            if file_config.service_areas_path is None
            else file_config.service_areas_path,
            max_service_radius_km=self.max_service_radius_km
            if file_config.max_service_radius_km is None
            else file_config.max_service_radius_km,
            reference_review_count=self.reference_review_count
            if file_config.reference_review_count is None
            else file_config.reference_review_count,
        )


def _parse_positive_int(value: str, *, default: int, env_name: str) -> int:
    """Parse a positive integer, returning ``default`` when unset."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = int(text)
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed


def _parse_positive_float(value: str, *, default: float, env_name: str) -> float:
    """Parse a positive number, returning ``default`` when unset."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = float(text)
    except ValueError as exc:
        raise PositiveNumberEnvVarError(env_name) from exc
    if not parsed > 0.0 or parsed == float("inf"):
        raise PositiveNumberEnvVarError(env_name)
    return parsed


def _parse_score(value: str, *, env_name: str) -> float:
    """Parse an optional 0–1 score threshold (0.0 when unset)."""
    text = value.strip()
    if not text:
        return 0.0
    try:
        parsed = float(text)
    except ValueError as exc:
        raise ScoreRangeEnvVarError(env_name) from exc
    if not 0.0 <= parsed <= 1.0:
        raise ScoreRangeEnvVarError(env_name)
    return parsed
