"""Tests for behavioral scoring."""

from __future__ import annotations

import pytest

from trustgate.detection import BehavioralScorer, BehavioralSignals

HUMAN = {
    "mouse_movements": 200,
    "keystrokes": 60,
    "time_on_page_ms": 30_000,
    "form_fill_time_ms": 20_000,
}


def signals(**overrides) -> BehavioralSignals:
    return BehavioralSignals(**{**HUMAN, **overrides})


@pytest.fixture
def scorer():
    return BehavioralScorer()


class TestBehavioralScorer:
    """Each rule adds its points and reason."""

    def test_human_scores_zero(self, scorer):
        sub = scorer.score(signals())
        assert sub.score == 0
        assert sub.reasons == []

    @pytest.mark.parametrize(
        ("overrides", "points", "reason"),
        [
            ({"mouse_movements": 0}, 30, "No mouse movement"),
            ({"mouse_movements": 4}, 15, "Very little mouse movement"),
            ({"keystrokes": 0}, 25, "No keystrokes"),
            ({"keystrokes": 9}, 10, "Very few keystrokes"),
            ({"time_on_page_ms": 2999}, 20, "Very short time on page"),
            ({"time_on_page_ms": 4999}, 10, "Short time on page"),
            ({"form_fill_time_ms": 1999}, 15, "Form filled too quickly"),
            ({"clipboard_paste": True}, 5, "Clipboard paste detected"),
            ({"rapid_submission": True}, 25, "Rapid form submission"),
        ],
    )
    def test_single_rule(self, scorer, overrides, points, reason):
        sub = scorer.score(signals(**overrides))
        assert sub.score == points
        assert sub.reasons == [reason]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"mouse_movements": 5},
            {"keystrokes": 10},
            {"time_on_page_ms": 5000},
            {"form_fill_time_ms": 2000},
        ],
    )
    def test_boundaries_do_not_score(self, scorer, overrides):
        assert scorer.score(signals(**overrides)).score == 0

    def test_rules_add_up(self, scorer):
        sub = scorer.score(signals(mouse_movements=3, keystrokes=5, clipboard_paste=True))
        assert sub.score == 15 + 10 + 5
        assert sub.reasons == [
            "Very little mouse movement",
            "Very few keystrokes",
            "Clipboard paste detected",
        ]

    def test_score_is_capped(self, scorer):
        sub = scorer.score(
            BehavioralSignals(
                mouse_movements=0,
                keystrokes=0,
                time_on_page_ms=0,
                form_fill_time_ms=0,
                clipboard_paste=True,
                rapid_submission=True,
            )
        )
        assert sub.score == 100
        assert len(sub.reasons) == 6

    def test_default_signals_saturate(self, scorer):
        assert scorer.score(BehavioralSignals()).score == 100
