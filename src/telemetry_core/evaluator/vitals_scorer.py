"""Core Web Vitals classification and composite UX score."""

from dataclasses import dataclass

from telemetry_core.domain.models import VitalRating
from telemetry_core.domain.sessions import CoreWebVitals, VitalsScore


@dataclass(frozen=True)
class VitalThreshold:
    good: float
    poor: float


# Google Core Web Vitals bounds: ms, except CLS which is unitless
VITALS_THRESHOLDS: dict[str, VitalThreshold] = {
    "FCP": VitalThreshold(good=1800, poor=3000),
    "LCP": VitalThreshold(good=2500, poor=4000),
    "FID": VitalThreshold(good=100, poor=300),
    "CLS": VitalThreshold(good=0.1, poor=0.25),
    "TTFB": VitalThreshold(good=800, poor=1800),
    "INP": VitalThreshold(good=200, poor=500),
}

SCORED_VITALS = ("FCP", "LCP", "FID", "CLS")


def rate_vital(metric: str, value: float | None) -> VitalRating:
    """Classify one vital. A missing value counts as needs-improvement."""
    if value is None:
        return VitalRating.NEEDS_IMPROVEMENT

    threshold = VITALS_THRESHOLDS[metric]
    if value <= threshold.good:
        return VitalRating.GOOD
    if value <= threshold.poor:
        return VitalRating.NEEDS_IMPROVEMENT
    return VitalRating.POOR


def score_vitals(vitals: CoreWebVitals) -> VitalsScore:
    """Rate FCP/LCP/FID/CLS and derive the 0-100 composite score.

    Any poor vital caps the score at 50 minus 10 per poor vital; all good
    yields 90 plus 2.5 per good vital; otherwise 50 plus 10 per good vital.
    """
    ratings = {name: rate_vital(name, getattr(vitals, name)) for name in SCORED_VITALS}

    good_count = sum(1 for r in ratings.values() if r == VitalRating.GOOD)
    poor_count = sum(1 for r in ratings.values() if r == VitalRating.POOR)

    if poor_count > 0:
        overall = VitalRating.POOR
        score = max(0.0, 50.0 - poor_count * 10)
    elif good_count == len(ratings):
        overall = VitalRating.GOOD
        score = 90.0 + good_count * 2.5
    else:
        overall = VitalRating.NEEDS_IMPROVEMENT
        score = 50.0 + good_count * 10

    return VitalsScore(
        FCP=ratings["FCP"],
        LCP=ratings["LCP"],
        FID=ratings["FID"],
        CLS=ratings["CLS"],
        overall=overall,
        score=min(100.0, score),
    )
