"""
Adaptation Decision State Machine
=================================
Pure transition function over an immutable AdaptationState:

    transition(state, sample, now) -> (state', activate_quiz)

Rules, evaluated once per sample:
  1. No face, or confidence < CONFIDENCE_THRESHOLD  -> unchanged
  2. confused / frustrated inside the cooldown window -> unchanged
  3. confused   -> simplified  (stamps the cooldown)
     frustrated -> quiz        (stamps the cooldown, asks for a fresh quiz)
  4. positive   -> encouraging (cooldown neither checked nor stamped)
  5. anything else -> normal, reason and message cleared

Only negative-emotion transitions read or write ``last_negative_adaptation_at``.
Manual overrides never touch it either.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional

from loguru import logger

from config import (
    ADAPTATION_COOLDOWN_SECONDS,
    CONFUSED_MESSAGE,
    CONFUSED_REASON,
    FRUSTRATED_MESSAGE,
    FRUSTRATED_REASON,
    POSITIVE_MESSAGE,
    POSITIVE_REASON,
    QUIZ_COMPLETED_MESSAGE,
    SIMPLIFY_REQUEST_MESSAGE,
    SIMPLIFY_REQUEST_REASON,
)
from emoteach.emotions import EmotionCategory, EmotionSample, categorize


class AdaptationMode(str, Enum):
    NORMAL = "normal"
    SIMPLIFIED = "simplified"
    ENCOURAGING = "encouraging"
    QUIZ = "quiz"


@dataclass(frozen=True)
class AdaptationState:
    mode: AdaptationMode = AdaptationMode.NORMAL
    reason: str = ""
    message: str = ""
    # monotonic seconds; None until the first negative transition
    last_negative_adaptation_at: Optional[float] = None

    @property
    def is_adapting(self) -> bool:
        return bool(self.reason)


class Transition(NamedTuple):
    state: AdaptationState
    start_quiz: bool = False


def in_cooldown(state: AdaptationState, now: float,
                cooldown: float = ADAPTATION_COOLDOWN_SECONDS) -> bool:
    if state.last_negative_adaptation_at is None:
        return False
    return (now - state.last_negative_adaptation_at) < cooldown


def transition(state: AdaptationState, sample: Optional[EmotionSample], now: float,
               cooldown: float = ADAPTATION_COOLDOWN_SECONDS) -> Transition:
    """Apply one emotion sample to ``state`` at monotonic time ``now``."""
    if sample is None or not sample.is_confident:
        logger.debug("Ignoring sample {} (confidence gate)", sample)
        return Transition(state)

    category = categorize(sample.label)

    if category in (EmotionCategory.CONFUSED, EmotionCategory.FRUSTRATED):
        if in_cooldown(state, now, cooldown):
            logger.debug(
                "Ignoring {} sample, {:.1f}s since last negative adaptation",
                sample.label, now - state.last_negative_adaptation_at,
            )
            return Transition(state)

        if category is EmotionCategory.CONFUSED:
            new_state = AdaptationState(
                mode=AdaptationMode.SIMPLIFIED,
                reason=CONFUSED_REASON,
                message=CONFUSED_MESSAGE,
                last_negative_adaptation_at=now,
            )
            logger.info("Confusion detected ({}, {}%) -> simplified", sample.label, sample.confidence)
            return Transition(new_state)

        new_state = AdaptationState(
            mode=AdaptationMode.QUIZ,
            reason=FRUSTRATED_REASON,
            message=FRUSTRATED_MESSAGE,
            last_negative_adaptation_at=now,
        )
        logger.info("Frustration detected ({}, {}%) -> quiz", sample.label, sample.confidence)
        return Transition(new_state, start_quiz=True)

    if category is EmotionCategory.POSITIVE:
        if state.mode is not AdaptationMode.ENCOURAGING:
            logger.info("Positive emotion ({}, {}%) -> encouraging", sample.label, sample.confidence)
        return Transition(replace(
            state,
            mode=AdaptationMode.ENCOURAGING,
            reason=POSITIVE_REASON,
            message=POSITIVE_MESSAGE,
        ))

    if state.mode is not AdaptationMode.NORMAL:
        logger.info("Neutral emotion ({}) -> normal", sample.label)
    return Transition(replace(state, mode=AdaptationMode.NORMAL, reason="", message=""))


# ----------------------------------------------------------------------
# User-initiated overrides (bypass both gates, never touch the cooldown)
# ----------------------------------------------------------------------
def request_simplified(state: AdaptationState) -> AdaptationState:
    return replace(
        state,
        mode=AdaptationMode.SIMPLIFIED,
        reason=SIMPLIFY_REQUEST_REASON,
        message=SIMPLIFY_REQUEST_MESSAGE,
    )


def enter_quiz(state: AdaptationState) -> AdaptationState:
    return replace(state, mode=AdaptationMode.QUIZ)


def quiz_completed(state: AdaptationState, score: int, total: int) -> AdaptationState:
    return replace(
        state,
        mode=AdaptationMode.ENCOURAGING,
        message=QUIZ_COMPLETED_MESSAGE.format(score=score, total=total),
    )


def quiz_exited(state: AdaptationState) -> AdaptationState:
    return replace(state, mode=AdaptationMode.NORMAL)
