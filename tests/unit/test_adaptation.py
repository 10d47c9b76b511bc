"""
Unit tests for the adaptation decision state machine.
"""

import pytest

from config import (
    ADAPTATION_COOLDOWN_SECONDS,
    CONFUSED_MESSAGE,
    CONFUSED_REASON,
    FRUSTRATED_REASON,
    POSITIVE_MESSAGE,
    POSITIVE_REASON,
    SIMPLIFY_REQUEST_MESSAGE,
    SIMPLIFY_REQUEST_REASON,
)
from emoteach.adaptation import (
    AdaptationMode,
    AdaptationState,
    enter_quiz,
    in_cooldown,
    quiz_completed,
    quiz_exited,
    request_simplified,
    transition,
)
from emoteach.emotions import EmotionSample


def sample(label, confidence=90):
    return EmotionSample(label=label, confidence=confidence)


class TestInitialState:
    def test_starts_normal_and_empty(self):
        state = AdaptationState()
        assert state.mode is AdaptationMode.NORMAL
        assert state.reason == ""
        assert state.message == ""
        assert state.last_negative_adaptation_at is None
        assert not state.is_adapting

    def test_first_negative_sample_is_never_in_cooldown(self):
        assert not in_cooldown(AdaptationState(), now=0.0)


class TestConfidenceGate:
    @pytest.mark.parametrize("label", ["angry", "sad", "happy", "neutral", "fearful"])
    @pytest.mark.parametrize("confidence", [0, 30, 59])
    def test_low_confidence_leaves_state_unchanged(self, label, confidence):
        state = AdaptationState(mode=AdaptationMode.ENCOURAGING, reason="r", message="m",
                                last_negative_adaptation_at=1.0)
        result = transition(state, sample(label, confidence), now=100.0)
        assert result.state == state
        assert not result.start_quiz

    def test_threshold_is_inclusive(self):
        result = transition(AdaptationState(), sample("happy", 60), now=0.0)
        assert result.state.mode is AdaptationMode.ENCOURAGING

    def test_no_face_is_ignored(self):
        state = AdaptationState(mode=AdaptationMode.SIMPLIFIED, reason="r", message="m")
        assert transition(state, EmotionSample.no_face(), now=5.0).state == state

    def test_missing_sample_is_ignored(self):
        state = AdaptationState()
        assert transition(state, None, now=5.0).state == state


class TestNegativeTransitions:
    @pytest.mark.parametrize("label", ["fearful", "sad", "confused"])
    def test_confusion_simplifies(self, label):
        result = transition(AdaptationState(), sample(label), now=3.0)
        assert result.state.mode is AdaptationMode.SIMPLIFIED
        assert result.state.reason == CONFUSED_REASON
        assert result.state.message == CONFUSED_MESSAGE
        assert result.state.last_negative_adaptation_at == 3.0
        assert not result.start_quiz

    @pytest.mark.parametrize("label", ["angry", "disgusted", "disgust"])
    def test_frustration_starts_quiz(self, label):
        result = transition(AdaptationState(), sample(label), now=0.0)
        assert result.state.mode is AdaptationMode.QUIZ
        assert result.state.reason == FRUSTRATED_REASON
        assert result.state.last_negative_adaptation_at == 0.0
        assert result.start_quiz

    def test_negative_within_cooldown_is_ignored(self):
        state = transition(AdaptationState(), sample("angry", 80), now=0.0).state
        for t in (1.0, 5.0, ADAPTATION_COOLDOWN_SECONDS - 0.001):
            result = transition(state, sample("fearful", 90), now=t)
            assert result.state == state
            assert not result.start_quiz

    def test_first_negative_after_cooldown_transitions_once(self):
        state = transition(AdaptationState(), sample("angry", 80), now=0.0).state
        state = transition(state, sample("fearful", 90), now=ADAPTATION_COOLDOWN_SECONDS).state
        assert state.mode is AdaptationMode.SIMPLIFIED
        assert state.last_negative_adaptation_at == ADAPTATION_COOLDOWN_SECONDS

        # the transition itself restarts the window
        again = transition(state, sample("angry", 90), now=ADAPTATION_COOLDOWN_SECONDS + 1.0)
        assert again.state == state
        assert not again.start_quiz

    def test_angry_then_fearful_scenario(self):
        state = transition(AdaptationState(), sample("angry", 80), now=0.0).state
        assert state.mode is AdaptationMode.QUIZ
        assert state.last_negative_adaptation_at == 0.0

        state = transition(state, sample("fearful", 90), now=5.0).state
        assert state.mode is AdaptationMode.QUIZ

        state = transition(state, sample("fearful", 90), now=11.0).state
        assert state.mode is AdaptationMode.SIMPLIFIED


class TestPositiveTransitions:
    @pytest.mark.parametrize("label", ["happy", "surprised", "surprise", "excited"])
    def test_positive_encourages(self, label):
        result = transition(AdaptationState(), sample(label), now=0.0)
        assert result.state.mode is AdaptationMode.ENCOURAGING
        assert result.state.reason == POSITIVE_REASON
        assert result.state.message == POSITIVE_MESSAGE

    def test_positive_repeats_every_tick(self):
        state = transition(AdaptationState(), sample("happy", 95), now=0.0).state
        state = transition(state, sample("happy", 95), now=1.0).state
        assert state.mode is AdaptationMode.ENCOURAGING
        assert state.last_negative_adaptation_at is None

    def test_positive_ignores_and_preserves_cooldown(self):
        state = transition(AdaptationState(), sample("sad"), now=0.0).state
        state = transition(state, sample("happy"), now=2.0).state
        assert state.mode is AdaptationMode.ENCOURAGING
        assert state.last_negative_adaptation_at == 0.0

        # positive did not extend the window
        state = transition(state, sample("angry"), now=ADAPTATION_COOLDOWN_SECONDS).state
        assert state.mode is AdaptationMode.QUIZ


class TestOtherCategory:
    @pytest.mark.parametrize("label", ["neutral", "bored", "", "???", 42])
    def test_other_labels_reset_to_normal(self, label):
        state = AdaptationState(mode=AdaptationMode.ENCOURAGING, reason="r", message="m",
                                last_negative_adaptation_at=4.0)
        result = transition(state, EmotionSample(label=label, confidence=99), now=5.0)
        assert result.state.mode is AdaptationMode.NORMAL
        assert result.state.reason == ""
        assert result.state.message == ""
        assert result.state.last_negative_adaptation_at == 4.0

    def test_neutral_resets_even_during_cooldown(self):
        state = transition(AdaptationState(), sample("sad"), now=0.0).state
        state = transition(state, sample("neutral"), now=1.0).state
        assert state.mode is AdaptationMode.NORMAL


class TestOverrides:
    def test_request_simplified_keeps_cooldown(self):
        state = AdaptationState(last_negative_adaptation_at=7.0)
        state = request_simplified(state)
        assert state.mode is AdaptationMode.SIMPLIFIED
        assert state.reason == SIMPLIFY_REQUEST_REASON
        assert state.message == SIMPLIFY_REQUEST_MESSAGE
        assert state.last_negative_adaptation_at == 7.0

    def test_enter_quiz_bypasses_gates(self):
        state = AdaptationState(last_negative_adaptation_at=7.0)
        state = enter_quiz(state)
        assert state.mode is AdaptationMode.QUIZ
        assert state.last_negative_adaptation_at == 7.0

    def test_quiz_completed_message(self):
        state = quiz_completed(AdaptationState(mode=AdaptationMode.QUIZ), score=2, total=3)
        assert state.mode is AdaptationMode.ENCOURAGING
        assert "2 out of 3" in state.message

    def test_quiz_exited_returns_to_normal(self):
        assert quiz_exited(AdaptationState(mode=AdaptationMode.QUIZ)).mode is AdaptationMode.NORMAL
