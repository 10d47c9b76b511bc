"""
Progress Accumulator
====================
Two independent increase paths, both clamped to MAX_PROGRESS:

    mark complete : current + 10
    quiz complete : progress at quiz start + 25

Neither path can lower progress.
"""

from config import MARK_COMPLETE_DELTA, MAX_PROGRESS, QUIZ_COMPLETION_DELTA


def clamp_progress(value):
    return max(0, min(MAX_PROGRESS, value))


def after_mark_complete(current):
    return max(current, clamp_progress(current + MARK_COMPLETE_DELTA))


def after_quiz_completion(progress_at_quiz_start, current=None):
    proposed = clamp_progress(progress_at_quiz_start + QUIZ_COMPLETION_DELTA)
    if current is None:
        return proposed
    return max(current, proposed)
