"""Human-readable reasons explaining why a contractor matched."""

from __future__ import annotations

from .models import CompatibilityResult

STRONG_FACTOR_THRESHOLD = 0.8

_FACTOR_REASONS = (
    ("service_type_score", "High service compatibility"),
    ("availability_score", "Available for your event date"),
    ("pricing_score", "Fits within your budget"),
    ("location_score", "Located in your service area"),
    ("performance_score", "Excellent performance record"),
)
PREMIUM_REASON = "Premium contractor"


def match_reasons(result: CompatibilityResult, is_premium: bool) -> tuple[str, ...]:
    """List reasons for every strong factor, plus the premium flag."""
    reasons = [
        reason
        for attribute, reason in _FACTOR_REASONS
        if getattr(result, attribute) > STRONG_FACTOR_THRESHOLD
    ]
    if is_premium:
        reasons.append(PREMIUM_REASON)
    return tuple(reasons)
