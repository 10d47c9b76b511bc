"""
Facial Expression Classifiers
=============================
Capability interface consumed by the sampler:

    is_loaded        : models ready
    await load()     : load / warm up models
    await classify(frame) -> Classification | None   (None = no face)

Implementations
---------------
FaceEmotionClassifier : YOLOv8 face detector + DeepFace emotion model on the
                        most confidently detected face crop.
ScriptedClassifier    : deterministic replay of (label, confidence, timestamp)
                        steps for tests and demos.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Tuple

import cv2
import numpy as np
import torch
from loguru import logger

from config import EMOTION_INPUT_SIZE, YOLO_CONFIDENCE, YOLO_FACE_MODEL
from emoteach.errors import ClassifierNotLoadedError


@dataclass(frozen=True)
class Classification:
    label: str
    confidence: float                       # 0..1
    bbox: Optional[Tuple[int, int, int, int]] = None
    detection_confidence: Optional[float] = None


class EmotionClassifier(Protocol):
    @property
    def is_loaded(self) -> bool:
        ...

    async def load(self) -> None:
        ...

    async def classify(self, frame) -> Optional[Classification]:
        ...


def pick_primary_face(detections: List[dict]) -> Optional[dict]:
    """Highest detection confidence wins; without confidences, the first reported face."""
    if not detections:
        return None
    if all(d.get("confidence") is not None for d in detections):
        return sorted(detections, key=lambda d: d["confidence"], reverse=True)[0]
    return detections[0]


class FaceEmotionClassifier:
    def __init__(self, model_path: str = YOLO_FACE_MODEL, min_face_confidence: float = YOLO_CONFIDENCE):
        self.model_path = model_path
        self.min_face_confidence = min_face_confidence
        self.device = torch.device("cuda:0" if torch.cuda.is_available() else "cpu")
        self.face_detector = None
        self.DeepFace = None

    @property
    def is_loaded(self) -> bool:
        return self.face_detector is not None and self.DeepFace is not None

    async def load(self) -> None:
        if self.is_loaded:
            return
        logger.info("Loading face detection and expression models on {}", self.device)
        await asyncio.to_thread(self._load_models)
        logger.info("Models loaded successfully")

    def _load_models(self) -> None:
        from ultralytics import YOLO
        from deepface import DeepFace

        face_detector = YOLO(self.model_path)
        face_detector.to(self.device)

        # ── Preload DeepFace emotion model so the first tick isn't stuck ──
        dummy = np.zeros((*EMOTION_INPUT_SIZE, 3), dtype=np.uint8)
        try:
            DeepFace.analyze(
                img_path=dummy,
                actions=["emotion"],
                detector_backend="skip",
                enforce_detection=False,
                silent=True,
            )
        except Exception as exc:
            logger.warning("DeepFace warm-up failed: {}", exc)

        self.face_detector = face_detector
        self.DeepFace = DeepFace

    async def classify(self, frame) -> Optional[Classification]:
        if not self.is_loaded:
            raise ClassifierNotLoadedError("Call load() before classify()")
        return await asyncio.to_thread(self._classify_sync, frame)

    # ------------------------------------------------------------------
    # Blocking inference, run off the event loop
    # ------------------------------------------------------------------
    def _detect_faces(self, frame) -> List[dict]:
        results = self.face_detector.predict(frame, device=self.device, verbose=False)
        faces = []
        for r in results[0]:
            conf = r.boxes.conf.item()
            if conf < self.min_face_confidence:
                continue

            x_c, y_c, w_b, h_b = r.boxes.xywh.cpu().numpy()[0]
            x_min = max(0, int(x_c - w_b / 2))
            y_min = max(0, int(y_c - h_b / 2))
            x_max = min(frame.shape[1], int(x_c + w_b / 2))
            y_max = min(frame.shape[0], int(y_c + h_b / 2))
            faces.append({"bbox": (x_min, y_min, x_max, y_max), "confidence": conf})
        return faces

    def _classify_sync(self, frame) -> Optional[Classification]:
        face = pick_primary_face(self._detect_faces(frame))
        if face is None:
            return None

        x_min, y_min, x_max, y_max = face["bbox"]
        cropped_face = frame[y_min:y_max, x_min:x_max]
        if cropped_face.size == 0:
            return None

        small_face = cv2.resize(cropped_face, EMOTION_INPUT_SIZE)
        emo_result = self.DeepFace.analyze(
            img_path=small_face,
            actions=["emotion"],
            detector_backend="skip",  # face already cropped by YOLO
            enforce_detection=False,
            silent=True,
        )
        if not isinstance(emo_result, list):
            emo_result = [emo_result]
        dominant = emo_result[0].get("dominant_emotion", "neutral")
        # DeepFace reports percentages
        score = emo_result[0].get("emotion", {}).get(dominant, 0.0) / 100.0

        return Classification(
            label=dominant,
            confidence=float(score),
            bbox=face["bbox"],
            detection_confidence=face["confidence"],
        )


def annotate_frame(frame, classification: Optional[Classification]):
    """Draw the classified face box and label on a frame copy."""
    out = frame.copy()
    if classification is None or classification.bbox is None:
        return out
    x1, y1, x2, y2 = classification.bbox
    color = (0, 200, 0)
    cv2.rectangle(out, (x1, y1), (x2, y2), color, 2)
    label = f"{classification.label} {classification.confidence:.0%}"
    cv2.putText(out, label, (x1, y1 - 8), cv2.FONT_HERSHEY_SIMPLEX, 0.55, color, 2)
    return out


# ----------------------------------------------------------------------
# Deterministic fake
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class ScriptedStep:
    label: Optional[str] = None             # None = no face
    confidence: float = 0.0                 # 0..1
    at: Optional[float] = None              # timestamp reported by clock()
    error: Optional[Exception] = None       # raised instead of classifying


class ScriptedClassifier:
    """Replays a fixed script of steps, one per classify() call."""

    def __init__(self, steps: Iterable[ScriptedStep], loaded: bool = True):
        self.steps = list(steps)
        self.calls = 0
        self._loaded = loaded
        self._now = 0.0

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def exhausted(self) -> bool:
        return self.calls >= len(self.steps)

    async def load(self) -> None:
        self._loaded = True

    def clock(self) -> float:
        """Timestamp of the most recently replayed step."""
        return self._now

    async def classify(self, frame) -> Optional[Classification]:
        if not self._loaded:
            raise ClassifierNotLoadedError("Call load() before classify()")
        if self.exhausted:
            return None
        step = self.steps[self.calls]
        self.calls += 1
        if step.at is not None:
            self._now = step.at
        if step.error is not None:
            raise step.error
        if step.label is None:
            return None
        return Classification(label=step.label, confidence=step.confidence)
