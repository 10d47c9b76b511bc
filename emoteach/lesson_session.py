"""
Lesson Session
==============
Owns one lesson's AdaptationState, the optional live QuizSession and the
latest emotion sample, and is the only place they are mutated:

    sampler --sample--> handle_sample --> transition() --> (quiz start)
    UI buttons -------> request_simplified / start_quiz / submit_answer /
                        advance_quiz / exit_quiz / mark_complete
    quiz completion / mark complete --> progress sink

Everything runs on one event queue, so there is no locking.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from loguru import logger

from config import DEFAULT_BANNER_MESSAGE, EXTRA_EXAMPLES, FRACTION_QUIZ
from emoteach import adaptation, progress
from emoteach.adaptation import AdaptationMode, AdaptationState
from emoteach.emotions import EmotionSample, emotion_emoji
from emoteach.lessons import Lesson, ProgressSink
from emoteach.quiz import Question, QuizResult, QuizSession


@dataclass(frozen=True)
class QuizView:
    prompt: str
    options: tuple
    marks: tuple
    position: int                           # 1-based
    total: int
    score: int
    answer_revealed: bool
    explanation: str
    action_label: str

    @property
    def score_text(self) -> str:
        return f"Score: {self.score}/{self.total}"


@dataclass(frozen=True)
class LessonView:
    """What the presentation layer should render for the current state."""

    title: str
    progress: int
    mode: AdaptationMode
    content_block: str                      # "full" | "simplified"
    content: str
    show_hints: bool
    hints: tuple
    show_extra_examples: bool
    extra_examples: tuple
    banner: str
    reason: str
    adapting: bool
    emotion_label: str
    emotion_detail: str
    emotion_emoji: str
    quiz: Optional[QuizView] = None


class LessonSession:
    def __init__(
        self,
        lesson: Lesson,
        progress_sink: ProgressSink,
        initial_progress: int = 0,
        questions: Optional[Sequence[Question]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.lesson = lesson
        self.progress_sink = progress_sink
        self.progress = initial_progress
        self.questions: List[Question] = (
            list(questions) if questions is not None
            else [Question.from_dict(q) for q in FRACTION_QUIZ]
        )
        self.clock = clock

        self.state = AdaptationState()
        self.quiz: Optional[QuizSession] = None
        self.progress_at_quiz_start: Optional[int] = None
        self.emotion: Optional[EmotionSample] = None

    # ------------------------------------------------------------------
    # Sampler input
    # ------------------------------------------------------------------
    def handle_sample(self, sample: EmotionSample, now: Optional[float] = None) -> AdaptationState:
        self.emotion = sample
        if now is None:
            now = self.clock()
        result = adaptation.transition(self.state, sample, now)
        self.state = result.state
        if result.start_quiz:
            self._start_quiz_session()
        return self.state

    def clear_emotion(self) -> None:
        """Video source stopped: forget the current emotion, keep the mode."""
        self.emotion = None

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    def request_simplified(self) -> AdaptationState:
        self.state = adaptation.request_simplified(self.state)
        logger.info("Simplified explanation requested for lesson {}", self.lesson.id)
        return self.state

    def start_quiz(self) -> QuizSession:
        self.state = adaptation.enter_quiz(self.state)
        return self._start_quiz_session()

    def submit_answer(self, option_index: int) -> bool:
        if self.quiz is None:
            logger.debug("Answer {} ignored, no quiz in progress", option_index)
            return False
        return self.quiz.submit_answer(option_index)

    def advance_quiz(self) -> Optional[QuizResult]:
        if self.quiz is None:
            logger.debug("Advance ignored, no quiz in progress")
            return None
        result = self.quiz.advance()
        if result is not None:
            self._finish_quiz(result)
        return result

    def exit_quiz(self) -> None:
        if self.quiz is not None:
            logger.info("Quiz abandoned at question {}/{}", self.quiz.index + 1, self.quiz.total)
        self.quiz = None
        self.progress_at_quiz_start = None
        self.state = adaptation.quiz_exited(self.state)

    def mark_complete(self) -> int:
        self._report(progress.after_mark_complete(self.progress))
        return self.progress

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _start_quiz_session(self) -> QuizSession:
        self.quiz = QuizSession(self.questions)
        self.progress_at_quiz_start = self.progress
        logger.info("Quiz started for lesson {} ({} questions)", self.lesson.id, self.quiz.total)
        return self.quiz

    def _finish_quiz(self, result: QuizResult) -> None:
        self.state = adaptation.quiz_completed(self.state, result.score, result.total)
        self._report(progress.after_quiz_completion(self.progress_at_quiz_start, self.progress))
        self.quiz = None
        self.progress_at_quiz_start = None

    def _report(self, new_progress: int) -> None:
        self.progress = new_progress
        self.progress_sink.report_progress(self.lesson.id, new_progress)

    # ------------------------------------------------------------------
    # View model
    # ------------------------------------------------------------------
    def view(self) -> LessonView:
        mode = self.state.mode
        simplified = mode is AdaptationMode.SIMPLIFIED

        emotion = self.emotion
        if emotion is not None and emotion.is_displayable:
            emotion_label = emotion.label
            emotion_detail = f"{emotion.confidence}%"
            emoji = emotion_emoji(emotion.label)
        else:
            emotion_label = "Detecting..."
            emotion_detail = "Please look at camera"
            emoji = emotion_emoji(None)

        return LessonView(
            title=self.lesson.title,
            progress=self.progress,
            mode=mode,
            content_block="simplified" if simplified else "full",
            content=self.lesson.simplified_text if simplified else self.lesson.full_text,
            show_hints=mode in (AdaptationMode.SIMPLIFIED, AdaptationMode.ENCOURAGING),
            hints=tuple(self.lesson.hints),
            show_extra_examples=simplified,
            extra_examples=tuple(EXTRA_EXAMPLES),
            banner=self.state.message or DEFAULT_BANNER_MESSAGE,
            reason=self.state.reason,
            adapting=self.state.is_adapting,
            emotion_label=emotion_label,
            emotion_detail=emotion_detail,
            emotion_emoji=emoji,
            quiz=self._quiz_view(),
        )

    def _quiz_view(self) -> Optional[QuizView]:
        quiz = self.quiz
        if quiz is None:
            return None
        question = quiz.current_question
        return QuizView(
            prompt=question.prompt,
            options=question.options,
            marks=tuple(quiz.option_marks()),
            position=quiz.index + 1,
            total=quiz.total,
            score=quiz.score,
            answer_revealed=quiz.answer_revealed,
            explanation=question.explanation if quiz.answer_revealed else "",
            action_label="Finish Quiz" if quiz.is_last_question else "Next Question",
        )


