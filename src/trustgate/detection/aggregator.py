"""Combine honeypot, behavioral, browser and request signals into a verdict.

Order of work:

1. Honeypot (~0ms). A triggered honeypot short-circuits to ``definite_bot``
   and is never diluted by the other sources.
2. Behavioral, browser and request scorers. They share no state and any of
   them may be missing; a missing source contributes 0 and no reasons.
3. Weighted blend, then classification against the policy thresholds.

The aggregator is a pure function of its inputs (plus the honeypot clock),
so one instance can serve any number of concurrent requests.
"""

from __future__ import annotations

import math

from trustgate.detection.behavioral import BehavioralScorer
from trustgate.detection.browser import BrowserSignalScorer
from trustgate.detection.honeypot import HoneypotEvaluator
from trustgate.detection.models import (
    BehavioralSignals,
    BrowserSignals,
    Category,
    Confidence,
    HoneypotFields,
    QuickCheckResult,
    RequestMetadata,
    ScoreBreakdown,
    TrustVerdict,
)
from trustgate.detection.policy import DEFAULT_POLICY, ScoringPolicy
from trustgate.detection.request_signals import RequestSignalScorer

_HONEYPOT_SCORE = 100


class TrustAggregator:
    """Run every scorer and classify the weighted result."""

    def __init__(
        self,
        *,
        policy: ScoringPolicy = DEFAULT_POLICY,
        honeypot_evaluator: HoneypotEvaluator | None = None,
        behavioral_scorer: BehavioralScorer | None = None,
        browser_scorer: BrowserSignalScorer | None = None,
        request_scorer: RequestSignalScorer | None = None,
    ) -> None:
        self._policy = policy
        self._honeypot = honeypot_evaluator or HoneypotEvaluator(policy=policy)
        self._behavioral = behavioral_scorer or BehavioralScorer()
        self._browser = browser_scorer or BrowserSignalScorer()
        self._request = request_scorer or RequestSignalScorer()

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    def aggregate(
        self,
        behavioral: BehavioralSignals | None = None,
        browser: BrowserSignals | None = None,
        honeypot: HoneypotFields | None = None,
        request: RequestMetadata | None = None,
    ) -> TrustVerdict:
        """Produce a :class:`TrustVerdict` from whatever signals are available.

        Calling with no inputs at all yields a clean verdict with score 0.
        """
        breakdown = ScoreBreakdown()
        reasons: list[str] = []

        # ---- Honeypot: short-circuit ----
        if honeypot is not None:
            result = self._honeypot.evaluate(honeypot)
            if result.is_bot:
                breakdown.honeypot = _HONEYPOT_SCORE
                return TrustVerdict(
                    score=_HONEYPOT_SCORE,
                    is_bot=True,
                    confidence=Confidence.CRITICAL,
                    category=Category.DEFINITE_BOT,
                    reasons=[f"Honeypot: {result.reason}"],
                    breakdown=breakdown,
                )

        # ---- Independent scorers ----
        if behavioral is not None:
            sub = self._behavioral.score(behavioral)
            breakdown.behavioral = sub.score
            reasons.extend(sub.reasons)

        if browser is not None:
            sub = self._browser.score(browser)
            breakdown.browser = sub.score
            reasons.extend(sub.reasons)

        if request is not None:
            sub = self._request.score(request)
            breakdown.request = sub.score
            reasons.extend(sub.reasons)

        # ---- Blend and classify ----
        score = self.blend(breakdown)
        confidence, category, is_bot = self.classify(score)

        return TrustVerdict(
            score=score,
            is_bot=is_bot,
            confidence=confidence,
            category=category,
            reasons=list(dict.fromkeys(reasons)),
            breakdown=breakdown,
        )

    def blend(self, breakdown: ScoreBreakdown) -> int:
        """Weighted sum of the sub-scores, rounded half up and clamped to 0-100."""
        p = self._policy
        total = (
            breakdown.behavioral * p.weight_behavioral
            + breakdown.browser * p.weight_browser
            + breakdown.honeypot * p.weight_honeypot
            + breakdown.request * p.weight_request
        )
        # Absorb float noise such as 79.99999999999999 before rounding
        rounded = math.floor(round(total, 9) + 0.5)
        return max(0, min(100, rounded))

    def classify(self, score: int) -> tuple[Confidence, Category, bool]:
        """Map a combined score onto (confidence, category, is_bot).

        ``suspicious`` is deliberately not a bot: it is flagged for
        monitoring and soft throttling, not blocked.
        """
        p = self._policy
        if score >= p.threshold_definite:
            return Confidence.CRITICAL, Category.DEFINITE_BOT, True
        if score >= p.threshold_likely:
            return Confidence.HIGH, Category.LIKELY_BOT, True
        if score >= p.threshold_suspicious:
            return Confidence.MEDIUM, Category.SUSPICIOUS, False
        return Confidence.LOW, Category.CLEAN, False

    def quick_check(
        self,
        behavioral: BehavioralSignals | None = None,
        honeypot: HoneypotFields | None = None,
    ) -> QuickCheckResult:
        """Cheap pre-check for hot, low-value endpoints.

        Only the honeypot and the behavioral scorer run, trading recall for
        latency.
        """
        if honeypot is not None:
            result = self._honeypot.evaluate(honeypot)
            if result.is_bot:
                return QuickCheckResult(is_bot=True, reason=result.reason)

        if behavioral is not None:
            sub = self._behavioral.score(behavioral)
            if sub.score >= self._policy.quick_check_threshold:
                return QuickCheckResult(is_bot=True, reason="Suspicious behavioral patterns")

        return QuickCheckResult(is_bot=False)
