"""Tunable scoring policy: blend weights, classification thresholds, timings.

The defaults were chosen empirically and have no calibration behind them.
They are kept together here so deployments can tune them from settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trustgate.config import Settings


@dataclass(frozen=True)
class ScoringPolicy:
    """Parameters of the weighted blend and its classification."""

    weight_behavioral: float = 0.30
    weight_browser: float = 0.35
    weight_honeypot: float = 0.20
    weight_request: float = 0.15

    threshold_definite: int = 80
    threshold_likely: int = 60
    threshold_suspicious: int = 40

    quick_check_threshold: int = 70

    # Honeypot timing, milliseconds
    instant_submit_ms: int = 1000
    fast_submit_ms: int = 3000
    form_token_max_age_ms: int = 60 * 60 * 1000
    form_token_clock_skew_ms: int = 5000

    def __post_init__(self) -> None:
        weights = (
            self.weight_behavioral,
            self.weight_browser,
            self.weight_honeypot,
            self.weight_request,
        )
        if any(w < 0 for w in weights):
            raise ValueError("weights must be non-negative")
        if abs(sum(weights) - 1.0) > 1e-6:
            raise ValueError(f"weights must sum to 1.0, got {sum(weights):.4f}")
        if not (
            0 <= self.threshold_suspicious < self.threshold_likely < self.threshold_definite <= 100
        ):
            raise ValueError("thresholds must satisfy 0 <= suspicious < likely < definite <= 100")
        if self.instant_submit_ms > self.fast_submit_ms:
            raise ValueError("instant_submit_ms must not exceed fast_submit_ms")

    @classmethod
    def from_settings(cls, settings: Settings) -> ScoringPolicy:
        return cls(
            weight_behavioral=settings.trust_weight_behavioral,
            weight_browser=settings.trust_weight_browser,
            weight_honeypot=settings.trust_weight_honeypot,
            weight_request=settings.trust_weight_request,
            threshold_definite=settings.trust_threshold_definite,
            threshold_likely=settings.trust_threshold_likely,
            threshold_suspicious=settings.trust_threshold_suspicious,
            quick_check_threshold=settings.trust_quick_check_threshold,
        )


DEFAULT_POLICY = ScoringPolicy()
