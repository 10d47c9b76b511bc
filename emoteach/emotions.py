"""
Emotion Vocabulary
==================
Normalises raw classifier output into EmotionSample events and maps labels
onto the coarse categories the adaptation engine reacts to:

    confused   : fearful, sad (and "confused" from richer classifiers)
    frustrated : angry, disgusted
    positive   : happy, surprised (and "excited")
    other      : everything else, including unknown labels
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import (
    CONFIDENCE_THRESHOLD,
    CONFUSED_EMOTIONS,
    EMOTION_ALIASES,
    EMOTION_DISPLAY_THRESHOLD,
    EMOTION_EMOJI,
    FRUSTRATED_EMOTIONS,
    POSITIVE_EMOTIONS,
    UNKNOWN_EMOJI,
)

# stands in for empty or non-string classifier labels; categorised as OTHER
UNKNOWN_LABEL = "unknown"


class EmotionCategory(str, Enum):
    CONFUSED = "confused"
    FRUSTRATED = "frustrated"
    POSITIVE = "positive"
    OTHER = "other"


@dataclass(frozen=True)
class EmotionSample:
    """One classification tick. ``label`` is None when no face was found."""

    label: Optional[str]
    confidence: int = 0

    @classmethod
    def no_face(cls) -> "EmotionSample":
        return cls(label=None, confidence=0)

    @classmethod
    def from_classifier(cls, label: str, probability: float) -> "EmotionSample":
        """Build a sample from a classifier label and a probability in [0, 1]."""
        probability = float(probability)
        if math.isnan(probability):
            probability = 0.0
        probability = max(0.0, min(1.0, probability))
        return cls(label=normalize_label(label) or UNKNOWN_LABEL,
                   confidence=round(probability * 100))

    @property
    def is_confident(self) -> bool:
        return self.label is not None and self.confidence >= CONFIDENCE_THRESHOLD

    @property
    def is_displayable(self) -> bool:
        return self.label is not None and self.confidence > EMOTION_DISPLAY_THRESHOLD


def normalize_label(label) -> Optional[str]:
    """Lower-case a raw label and fold DeepFace short names into the vocabulary."""
    if not isinstance(label, str):
        return None
    label = label.strip().lower()
    if not label:
        return None
    return EMOTION_ALIASES.get(label, label)


def categorize(label) -> EmotionCategory:
    """Map a label to its adaptation category. Unknown input is OTHER."""
    label = normalize_label(label)
    if label in CONFUSED_EMOTIONS:
        return EmotionCategory.CONFUSED
    if label in FRUSTRATED_EMOTIONS:
        return EmotionCategory.FRUSTRATED
    if label in POSITIVE_EMOTIONS:
        return EmotionCategory.POSITIVE
    return EmotionCategory.OTHER


def emotion_emoji(label) -> str:
    return EMOTION_EMOJI.get(normalize_label(label), UNKNOWN_EMOJI)
