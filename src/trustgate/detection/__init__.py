"""Trust detection package: honeypot, behavioral, browser and request signals.

Public API
----------
- :class:`TrustAggregator`: full evaluation and :meth:`~TrustAggregator.quick_check`
- :class:`TrustVerdict`, :class:`Confidence`, :class:`Category`: result types
- :class:`HoneypotEvaluator`, :func:`generate_form_token`: honeypot checks
- :func:`log_bot_detection`: forensic logging side channel
- :func:`parse_evaluation_request`: client telemetry validation boundary
"""

from trustgate.detection.aggregator import TrustAggregator
from trustgate.detection.behavioral import BehavioralScorer
from trustgate.detection.browser import BrowserSignalScorer
from trustgate.detection.forensics import log_bot_detection
from trustgate.detection.honeypot import HoneypotEvaluator, generate_form_token
from trustgate.detection.models import (
    BehavioralSignals,
    BrowserSignals,
    Category,
    Confidence,
    HoneypotFields,
    HoneypotResult,
    ProbeFailure,
    ProbeResult,
    QuickCheckResult,
    RequestMetadata,
    ScoreBreakdown,
    SubScore,
    TrustVerdict,
)
from trustgate.detection.policy import DEFAULT_POLICY, ScoringPolicy
from trustgate.detection.request_signals import RequestSignalScorer
from trustgate.detection.schemas import (
    EvaluationInputs,
    TelemetryValidationError,
    parse_evaluation_request,
)

__all__ = [
    "DEFAULT_POLICY",
    "BehavioralScorer",
    "BehavioralSignals",
    "BrowserSignalScorer",
    "BrowserSignals",
    "Category",
    "Confidence",
    "EvaluationInputs",
    "HoneypotEvaluator",
    "HoneypotFields",
    "HoneypotResult",
    "ProbeFailure",
    "ProbeResult",
    "QuickCheckResult",
    "RequestMetadata",
    "RequestSignalScorer",
    "ScoreBreakdown",
    "ScoringPolicy",
    "SubScore",
    "TelemetryValidationError",
    "TrustAggregator",
    "TrustVerdict",
    "generate_form_token",
    "log_bot_detection",
    "parse_evaluation_request",
]
