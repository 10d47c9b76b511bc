"""
Quiz Sub-Engine
===============
Linear walk over a fixed question sequence:

    answering(0) -> revealed(0) -> answering(1) -> ... -> revealed(n-1) -> completed

Out-of-order actions (submitting twice, advancing before answering, anything
after completion) are rejected as no-ops and never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from loguru import logger

from emoteach.errors import QuizValidationError


@dataclass(frozen=True)
class Question:
    prompt: str
    options: tuple
    correct_option_index: int
    explanation: str = ""

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))
        if len(self.options) < 2:
            raise QuizValidationError(f"Question needs at least 2 options: {self.prompt!r}")
        if not 0 <= self.correct_option_index < len(self.options):
            raise QuizValidationError(
                f"Correct option {self.correct_option_index} out of range for {self.prompt!r}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            prompt=data["prompt"],
            options=data["options"],
            correct_option_index=data["correct_option_index"],
            explanation=data.get("explanation", ""),
        )

    def is_correct(self, option_index: int) -> bool:
        return option_index == self.correct_option_index


class QuizPhase(str, Enum):
    ANSWERING = "answering"
    REVEALED = "revealed"
    COMPLETED = "completed"


class OptionMark(str, Enum):
    """Per-option feedback once an answer is revealed."""
    NONE = "none"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int


class QuizSession:
    def __init__(self, questions: Sequence[Question]):
        if not questions:
            raise QuizValidationError("A quiz needs at least one question")
        self.questions: List[Question] = list(questions)
        self.index = 0
        self.score = 0
        self.selected_answer: Optional[int] = None
        self.phase = QuizPhase.ANSWERING

    @classmethod
    def from_bank(cls, bank: Sequence[dict]) -> "QuizSession":
        return cls([Question.from_dict(q) for q in bank])

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------
    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Question:
        return self.questions[self.index]

    @property
    def answer_revealed(self) -> bool:
        return self.phase is QuizPhase.REVEALED

    @property
    def is_completed(self) -> bool:
        return self.phase is QuizPhase.COMPLETED

    @property
    def is_last_question(self) -> bool:
        return self.index == self.total - 1

    def option_marks(self) -> List[OptionMark]:
        """Feedback marks for the current question's options."""
        question = self.current_question
        if self.phase is QuizPhase.ANSWERING:
            return [OptionMark.NONE] * len(question.options)
        marks = []
        for i in range(len(question.options)):
            if question.is_correct(i):
                marks.append(OptionMark.CORRECT)
            elif i == self.selected_answer:
                marks.append(OptionMark.INCORRECT)
            else:
                marks.append(OptionMark.NONE)
        return marks

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def submit_answer(self, option_index: int) -> bool:
        """Record an answer for the current question. Returns False if rejected."""
        if self.phase is not QuizPhase.ANSWERING:
            logger.debug("Rejected answer {} in phase {}", option_index, self.phase.value)
            return False
        if not 0 <= option_index < len(self.current_question.options):
            logger.debug("Rejected out-of-range answer {}", option_index)
            return False

        self.selected_answer = option_index
        self.phase = QuizPhase.REVEALED
        if self.current_question.is_correct(option_index):
            self.score += 1
        logger.debug("Question {}/{} answered, score {}", self.index + 1, self.total, self.score)
        return True

    def advance(self) -> Optional[QuizResult]:
        """Move past a revealed question. Returns the result once the last one is passed."""
        if self.phase is not QuizPhase.REVEALED:
            logger.debug("Rejected advance in phase {}", self.phase.value)
            return None

        if not self.is_last_question:
            self.index += 1
            self.selected_answer = None
            self.phase = QuizPhase.ANSWERING
            return None

        self.phase = QuizPhase.COMPLETED
        logger.info("Quiz completed: {}/{}", self.score, self.total)
        return QuizResult(score=self.score, total=self.total)
