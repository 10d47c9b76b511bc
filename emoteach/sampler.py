"""
Classification Sampler
======================
1 Hz ticker that grabs the current frame, runs the classifier on it and hands
at most one EmotionSample per tick to a callback.

- No tick work while the source is inactive or the models are not loaded.
- A classifier failure is logged and that tick is skipped.
- Ticks never overlap: a slow classification swallows the ticks it overran.
- Stopping the source bumps a generation counter, so a classification that
  finishes after the stop is discarded instead of applied.

The Streamlit app calls tick() itself from an st.fragment rerun every
SAMPLE_INTERVAL_SECONDS, since a script rerun has no long-lived event loop.
run() and start() are the ticker for hosts that own an asyncio loop. The
source-started listener only schedules run() when a loop is already running,
so it does nothing under Streamlit.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from loguru import logger

from config import SAMPLE_INTERVAL_SECONDS
from emoteach.classifiers import Classification, EmotionClassifier
from emoteach.emotions import EmotionSample
from emoteach.video_source import STARTED, STOPPED, VideoSource

SampleCallback = Callable[[EmotionSample, float], None]


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class EmotionSampler:
    def __init__(
        self,
        video_source: VideoSource,
        classifier: EmotionClassifier,
        on_sample: SampleCallback,
        on_clear: Optional[Callable[[], None]] = None,
        interval: float = SAMPLE_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.video_source = video_source
        self.classifier = classifier
        self.on_sample = on_sample
        self.on_clear = on_clear
        self.interval = interval
        self.clock = clock

        self.latest: Optional[Classification] = None
        self.ticks = 0
        self._generation = 0
        self._running = False
        self._task: Optional[asyncio.Task] = None

        video_source.add_listener(STARTED, self._on_source_started)
        video_source.add_listener(STOPPED, self.stop)

    @property
    def is_running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # One tick
    # ------------------------------------------------------------------
    async def tick(self) -> Optional[EmotionSample]:
        """Classify the current frame once. Returns the emitted sample, if any."""
        self.ticks += 1
        if not self.video_source.is_active or not self.classifier.is_loaded:
            return None

        generation = self._generation
        frame = self.video_source.current_frame()
        if frame is None:
            return None

        try:
            result = await self.classifier.classify(frame)
        except Exception as exc:
            logger.warning("Emotion analysis error: {}", exc)
            return None

        if generation != self._generation or not self.video_source.is_active:
            logger.debug("Discarding classification that finished after stop")
            return None

        self.latest = result
        if result is None:
            sample = EmotionSample.no_face()
        else:
            sample = EmotionSample.from_classifier(result.label, result.confidence)
            logger.debug("Emotion: {} ({}%)", sample.label, sample.confidence)

        self.on_sample(sample, self.clock())
        return sample

    # ------------------------------------------------------------------
    # Ticker
    # ------------------------------------------------------------------
    async def run(self) -> None:
        """Tick at a fixed cadence until stopped or the source goes inactive."""
        loop = asyncio.get_running_loop()
        self._running = True
        next_tick = loop.time()
        while self._running and self.video_source.is_active:
            await self.tick()
            next_tick += self.interval
            now = loop.time()
            if now > next_tick and self.interval > 0:
                missed = int((now - next_tick) // self.interval) + 1
                logger.debug("Classification overran {} tick(s)", missed)
                next_tick += missed * self.interval
            await asyncio.sleep(max(0.0, next_tick - now))
        self._running = False

    def start(self) -> asyncio.Task:
        """Schedule run() on the running event loop."""
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def stop(self) -> None:
        """Halt future ticks, drop in-flight results and clear the current emotion."""
        self._generation += 1
        self._running = False
        self.latest = None

        task, self._task = self._task, None
        if task is not None and not task.done():
            current = asyncio.current_task() if _running_loop() else None
            if task is not current:
                task.cancel()

        if self.on_clear is not None:
            self.on_clear()
        logger.info("Emotion sampling stopped")

    def _on_source_started(self) -> None:
        if _running_loop() is not None:
            self.start()
