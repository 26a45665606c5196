"""Weight configuration for combining sub-scores into an overall score."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields

from ..observability import get_logger

WEIGHT_SUM_TOLERANCE = 1e-9


@dataclass(frozen=True)
class WeightConfig:
    """Coefficients for the six compatibility factors."""

    service_type: float = 0.30
    experience: float = 0.15
    pricing: float = 0.20
    location: float = 0.15
    performance: float = 0.10
    availability: float = 0.10

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in weight_names())


DEFAULT_WEIGHTS = WeightConfig()


def weight_names() -> tuple[str, ...]:
    """Return factor names in declaration order."""
    return tuple(item.name for item in fields(WeightConfig))


def normalise_weights(weights: WeightConfig | None) -> WeightConfig:
    """Return weights rescaled to sum to 1.0.

    Negative and non-finite weights count as zero. A configuration with no positive weight
    falls back to ``DEFAULT_WEIGHTS``. This never raises; adjustments are logged.
    """
    source = weights if weights is not None else DEFAULT_WEIGHTS
    cleaned: dict[str, float] = {}
    dropped: list[str] = []
    for name in weight_names():
        value = getattr(source, name)
        if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0.0:
            dropped.append(name)
            value = 0.0
        cleaned[name] = float(value)

    total = sum(cleaned.values())
    logger = get_logger("eventpros_matching.weights")
    if dropped:
        logger.warning("Ignoring invalid weights for: %s", ", ".join(dropped))
    if total <= 0.0:
        logger.warning("No positive weights supplied; using default weights")
        return normalise_weights(DEFAULT_WEIGHTS)
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        logger.warning("Weights sum to %.6f; rescaling to 1.0", total)

    return WeightConfig(**{name: value / total for name, value in cleaned.items()})
