"""Match run: score and rank contractors for an event and write the outputs.

Outputs (in ``out_dir``):
- contractor_rankings.csv: one row per ranked contractor with every sub-score
- contractor_explain.csv: match reasons per ranked contractor
- scoring_failures.csv: contractors that could not be scored
- matching_analytics.json: summary statistics for the run
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

import pandas as pd

from ..config import MatchingConfig
from ..domain.compatibility import ScoringSettings, score
from ..domain.models import CompatibilityResult
from ..domain.weights import WeightConfig
from ..exceptions import WeightProfileCatalogNotConfiguredError
from ..infrastructure import LocalFileSystem
from ..observability import get_logger
from ..protocols import FileSystem
from .inputs import load_contractor_profile, load_contractor_profiles, load_event_requirements
from .matching import MatchingFilters, MatchingRequest, MatchingResponse, find_matches
from .service_areas import load_service_areas
from .weight_profiles import load_weight_profile_catalog, resolve_weight_profile

SCORE_COLUMNS = (
    "service_type_score",
    "experience_score",
    "pricing_score",
    "location_score",
    "performance_score",
    "availability_score",
    "overall_score",
)
RANKING_COLUMNS = ("rank", "contractor_id", "company_name", "is_premium", *SCORE_COLUMNS)
EXPLAIN_COLUMNS = ("rank", "contractor_id", "overall_score", "match_reasons")
FAILURE_COLUMNS = ("index", "contractor_id", "field", "error")


def build_scoring_settings(config: MatchingConfig, fs: FileSystem) -> ScoringSettings:
    """Assemble factor-scoring settings, loading the gazetteer when configured."""
    areas_path = Path(config.service_areas_path) if config.service_areas_path else None
    return ScoringSettings(
        reference_review_count=config.reference_review_count,
        max_service_radius_km=config.max_service_radius_km,
        service_areas=load_service_areas(path=areas_path, fs=fs),
    )


def resolve_weights(config: MatchingConfig, fs: FileSystem) -> WeightConfig | None:
    """Return the configured weight profile, or None to use the default weights.

    Raises:
        WeightProfileCatalogNotConfiguredError: If a profile is named without a catalogue.
        WeightProfileSelectionError: If the named profile is not in the catalogue.
    """
    if not config.weight_profiles_path:
        if config.weight_profile:
            raise WeightProfileCatalogNotConfiguredError(config.weight_profile)
        return None
    catalog = load_weight_profile_catalog(path=Path(config.weight_profiles_path), fs=fs)
    profile = resolve_weight_profile(catalog, config.weight_profile or None)
    get_logger("eventpros_matching.run_match").info("Using weight profile: %s", profile.name)
    return profile.weights


def _rankings_frame(response: MatchingResponse) -> pd.DataFrame:
    rows = [
        {
            "rank": match.rank,
            "contractor_id": match.contractor_id,
            "company_name": match.company_name,
            "is_premium": match.is_premium,
            **asdict(match.result),
        }
        for match in response.matches
    ]
    return pd.DataFrame(rows, columns=list(RANKING_COLUMNS))


def _explain_frame(response: MatchingResponse) -> pd.DataFrame:
    rows = [
        {
            "rank": match.rank,
            "contractor_id": match.contractor_id,
            "overall_score": match.result.overall_score,
            "match_reasons": "; ".join(match.match_reasons),
        }
        for match in response.matches
    ]
    return pd.DataFrame(rows, columns=list(EXPLAIN_COLUMNS))


def _failures_frame(response: MatchingResponse) -> pd.DataFrame:
    rows = [
        {
            "index": failure.index,
            "contractor_id": failure.contractor_id,
            "field": failure.error.field_name,
            "error": str(failure.error),
        }
        for failure in response.failures
    ]
    return pd.DataFrame(rows, columns=list(FAILURE_COLUMNS))


def run_match(
    event_path: str | Path,
    contractors_path: str | Path,
    out_dir: str | Path = "data/processed",
    config: MatchingConfig | None = None,
    fs: FileSystem | None = None,
    filters: MatchingFilters | None = None,
    page: int = 1,
    limit: int | None = None,
) -> dict[str, Path]:
    """Rank contractors for one event and write rankings, explanations and analytics.

    Args:
        event_path: JSON file holding one event object.
        contractors_path: JSON file shaped ``{"contractors": [...]}``.
        out_dir: Directory for output files.
        config: Matching configuration (required; load at entry point).
        fs: Optional filesystem for testing.
        filters: Contractor filters; the score threshold defaults to ``config.min_score``.
        page: 1-based page of the ranking to write.
        limit: Page size; defaults to ``config.page_limit``.

    Returns:
        Dict with paths to the rankings, explain, failures and analytics files.
    """
    if config is None:
        raise RuntimeError(
            "MatchingConfig is required. Load it once at the entry point with "
            "MatchingConfig.from_env() and pass it through."
        )

    fs = fs or LocalFileSystem()
    logger = get_logger("eventpros_matching.run_match")
    out_dir = Path(out_dir)
    fs.mkdir(out_dir, parents=True)

    event = load_event_requirements(path=Path(event_path), fs=fs)
    contractors = load_contractor_profiles(path=Path(contractors_path), fs=fs)
    logger.info("Loaded event %s and %s contractors", event.event_id, len(contractors))

    request = MatchingRequest(
        filters=filters or MatchingFilters(min_score=config.min_score),
        page=page,
        limit=limit or config.page_limit,
        algorithm=config.ranking_algorithm,
    )
    response = find_matches(
        event,
        contractors,
        request,
        weights=resolve_weights(config, fs),
        settings=build_scoring_settings(config, fs),
    )

    rankings_path = out_dir / "contractor_rankings.csv"
    fs.write_csv(_rankings_frame(response), rankings_path)
    logger.info(
        "Rankings: %s (%s of %s matches)", rankings_path, len(response.matches), response.total
    )

    explain_path = out_dir / "contractor_explain.csv"
    fs.write_csv(_explain_frame(response), explain_path)
    logger.info("Explainability: %s", explain_path)

    failures_path = out_dir / "scoring_failures.csv"
    fs.write_csv(_failures_frame(response), failures_path)
    if response.failures:
        logger.warning("Failures: %s (%s contractors)", failures_path, len(response.failures))

    analytics_path = out_dir / "matching_analytics.json"
    fs.write_json(asdict(response.analytics), analytics_path)
    logger.info("Analytics: %s", analytics_path)

    return {
        "rankings": rankings_path,
        "explain": explain_path,
        "failures": failures_path,
        "analytics": analytics_path,
    }


def run_score(
    event_path: str | Path,
    contractor_path: str | Path,
    config: MatchingConfig,
    fs: FileSystem | None = None,
) -> CompatibilityResult:
    """Score a single contractor file against a single event file."""
    fs = fs or LocalFileSystem()
    event = load_event_requirements(path=Path(event_path), fs=fs)
    contractor = load_contractor_profile(path=Path(contractor_path), fs=fs)
    return score(
        event,
        contractor,
        weights=resolve_weights(config, fs),
        settings=build_scoring_settings(config, fs),
    )
