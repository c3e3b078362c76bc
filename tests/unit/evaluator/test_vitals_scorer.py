"""Tests for Core Web Vitals scoring."""

import pytest

from telemetry_core.domain.models import VitalRating
from telemetry_core.domain.sessions import CoreWebVitals
from telemetry_core.evaluator.vitals_scorer import rate_vital, score_vitals


class TestRateVital:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2000, VitalRating.GOOD),
            (2500, VitalRating.GOOD),
            (3000, VitalRating.NEEDS_IMPROVEMENT),
            (4000, VitalRating.NEEDS_IMPROVEMENT),
            (5000, VitalRating.POOR),
        ],
    )
    def test_lcp_bands(self, value, expected):
        assert rate_vital("LCP", value) == expected

    def test_missing_is_needs_improvement(self):
        assert rate_vital("FCP", None) == VitalRating.NEEDS_IMPROVEMENT

    def test_cls_is_unitless(self):
        assert rate_vital("CLS", 0.05) == VitalRating.GOOD
        assert rate_vital("CLS", 0.3) == VitalRating.POOR


class TestScoreVitals:
    def test_all_good(self):
        score = score_vitals(CoreWebVitals(FCP=1000, LCP=2000, FID=50, CLS=0.05))

        assert score.overall == VitalRating.GOOD
        assert score.score == 100
        assert score.score >= 90

    def test_any_poor(self):
        score = score_vitals(CoreWebVitals(FCP=1000, LCP=5000, FID=500, CLS=0.05))

        assert score.overall == VitalRating.POOR
        assert score.score == 30

    def test_mixed(self):
        score = score_vitals(CoreWebVitals(FCP=1000, LCP=3000, FID=50, CLS=0.2))

        assert score.overall == VitalRating.NEEDS_IMPROVEMENT
        assert score.score == 70

    def test_empty_vitals(self):
        score = score_vitals(CoreWebVitals())

        assert score.overall == VitalRating.NEEDS_IMPROVEMENT
        assert score.score == 50

    def test_ttfb_and_inp_do_not_affect_score(self):
        base = CoreWebVitals(FCP=1000, LCP=2000, FID=50, CLS=0.05)
        slow = CoreWebVitals(FCP=1000, LCP=2000, FID=50, CLS=0.05, TTFB=9000, INP=9000)

        assert score_vitals(base) == score_vitals(slow)
