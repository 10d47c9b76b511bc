"""
Unit tests for face selection and the scripted classifier.
"""

import pytest

from emoteach.classifiers import ScriptedClassifier, ScriptedStep, pick_primary_face
from emoteach.errors import ClassifierNotLoadedError


class TestPickPrimaryFace:
    def test_no_faces(self):
        assert pick_primary_face([]) is None

    def test_highest_confidence_wins(self):
        faces = [
            {"bbox": (0, 0, 1, 1), "confidence": 0.62},
            {"bbox": (2, 2, 3, 3), "confidence": 0.91},
            {"bbox": (4, 4, 5, 5), "confidence": 0.75},
        ]
        assert pick_primary_face(faces)["bbox"] == (2, 2, 3, 3)

    def test_first_reported_without_confidences(self):
        faces = [{"bbox": (0, 0, 1, 1)}, {"bbox": (2, 2, 3, 3), "confidence": 0.9}]
        assert pick_primary_face(faces)["bbox"] == (0, 0, 1, 1)


class TestScriptedClassifier:
    @pytest.mark.asyncio
    async def test_replays_steps_in_order(self):
        classifier = ScriptedClassifier([
            ScriptedStep("angry", 0.8, at=0.0),
            ScriptedStep(None, at=1.0),
            ScriptedStep("happy", 0.95, at=2.0),
        ])
        first = await classifier.classify("frame")
        assert (first.label, first.confidence) == ("angry", 0.8)
        assert classifier.clock() == 0.0
        assert await classifier.classify("frame") is None
        assert classifier.clock() == 1.0
        assert (await classifier.classify("frame")).label == "happy"
        assert classifier.exhausted
        assert await classifier.classify("frame") is None

    @pytest.mark.asyncio
    async def test_scripted_failure_raises(self):
        classifier = ScriptedClassifier([ScriptedStep(error=RuntimeError("boom"))])
        with pytest.raises(RuntimeError):
            await classifier.classify("frame")

    @pytest.mark.asyncio
    async def test_requires_load(self):
        classifier = ScriptedClassifier([ScriptedStep("happy", 0.9)], loaded=False)
        with pytest.raises(ClassifierNotLoadedError):
            await classifier.classify("frame")
        await classifier.load()
        assert classifier.is_loaded
        assert (await classifier.classify("frame")).label == "happy"
