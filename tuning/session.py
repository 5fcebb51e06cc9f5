"""ABOUTME: Tuning session state machine: lifecycle, target note, auto mode and graph cadence.
ABOUTME: Single owner of all session state; audio and graph ticks go through it under one lock."""
import logging
import threading
import time
from enum import Enum
from typing import Callable, NamedTuple, Optional, Tuple

import numpy as np

from tuning.events import EventChannel, TuningStatus
from tuning.graph import DEFAULT_MAX_GRAPH_POINTS, GraphBuffer, GraphPoint, make_point
from tuning.notes import (
    DEFAULT_TARGET, STANDARD_TUNING, cents_deviation, closest_note,
    frequency_for_note, normalize_note_name,
)
from tuning.pipeline import DEFAULT_HISTORY_SIZE, DEFAULT_WINDOW_SIZE, PitchPipeline
from tuning.pitch_estimator import NO_PITCH, PitchCandidate
from tuning.scheduler import PeriodicTask
from tuning.stability import INITIAL_STATE, StabilityFilter

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_INTERVAL = 0.2  # seconds


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class TuningTarget(NamedTuple):
    note_name: str
    frequency_hz: float


def _default_target() -> TuningTarget:
    return TuningTarget(DEFAULT_TARGET, frequency_for_note(DEFAULT_TARGET))


class TuningSession:
    """Owns the tuner state and the two periodic activities that feed it.

    Audio buffers arrive from the sample source on its own thread and are
    analysed there, one at a time. The graph sampler runs on a task created by
    `scheduler(interval, callback)`, which must return an object with a
    `cancel()` method. Every state change happens inside this class under
    `self._lock`.

    Each start() and stop() advances a generation counter. An analysis result
    is applied only if the generation it started under is still current, so a
    callback that arrives late from a stopped stream is dropped.
    """

    def __init__(self, source, transport=None, sample_rate: Optional[int] = None,
                 window_size: int = DEFAULT_WINDOW_SIZE,
                 history_size: int = DEFAULT_HISTORY_SIZE,
                 max_graph_points: int = DEFAULT_MAX_GRAPH_POINTS,
                 graph_interval: float = DEFAULT_GRAPH_INTERVAL,
                 initial_target: str = DEFAULT_TARGET,
                 auto_mode: bool = False,
                 scheduler: Optional[Callable] = None,
                 clock: Callable[[], float] = time.time):
        self.source = source
        self.transport = transport
        self.graph_interval = graph_interval
        self.scheduler = scheduler or PeriodicTask.start_new
        self.clock = clock

        rate = sample_rate if sample_rate is not None else source.sample_rate
        self.pipeline = PitchPipeline(rate, window_size, history_size)
        self.stability_filter = StabilityFilter()
        self.events: EventChannel[TuningStatus] = EventChannel()

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._generation = 0
        self._graph_task = None
        self._graph = GraphBuffer(max_graph_points)
        self._stability = INITIAL_STATE
        self._last_candidate: PitchCandidate = NO_PITCH
        self._detected_frequency: Optional[float] = None
        self._detected_note_name: Optional[str] = None
        self._auto_mode = bool(auto_mode)
        self._target: Optional[TuningTarget] = None if self._auto_mode else self._resolve_target(initial_target)
        self._last_published: Optional[TuningStatus] = None

    # ── Read-only views ──────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def auto_mode(self) -> bool:
        return self._auto_mode

    @property
    def target(self) -> Optional[TuningTarget]:
        return self._target

    @property
    def max_graph_points(self) -> int:
        return self._graph.max_points

    @property
    def last_candidate(self) -> PitchCandidate:
        return self._last_candidate

    def graph_points(self) -> Tuple[GraphPoint, ...]:
        """Current graph, most recent point last."""
        with self._lock:
            return self._graph.snapshot()

    def status(self) -> TuningStatus:
        with self._lock:
            return self._build_status()

    # ── Control ─────────────────────────────────────────────────

    def start(self):
        """Open the sample source and begin analysis and graph sampling.

        No-op when already active. Raises SampleSourceError if the audio input
        cannot be acquired; the session then stays idle.
        """
        with self._lock:
            if self._state is SessionState.ACTIVE:
                return
            self._generation += 1
            generation = self._generation
            self._reset_detection()
            self.pipeline.reset()
            self.source.on_samples(lambda samples: self._on_samples(samples, generation))
            try:
                self.source.open()
            except Exception:
                self.source.on_samples(None)
                raise
            self._state = SessionState.ACTIVE
            self._graph_task = self.scheduler(self.graph_interval, self.sample_graph)
            logger.info("Tuning started (target=%s, auto=%s)",
                        self._target.note_name if self._target else None, self._auto_mode)
            status = self._status_if_changed()
        self._publish(status)

    def stop(self):
        """Halt analysis and sampling and clear the graph. No-op when idle."""
        with self._lock:
            if self._state is SessionState.IDLE:
                return
            self._state = SessionState.IDLE
            self._generation += 1
            task, self._graph_task = self._graph_task, None
            self._graph.clear()
            self._reset_detection()
            status = self._status_if_changed()

        # Outside the lock: closing the stream waits for a running audio
        # callback, which may itself be waiting on the lock.
        if task is not None:
            task.cancel()
        self.source.on_samples(None)
        self.source.close()
        self.pipeline.reset()
        logger.info("Tuning stopped")
        self._publish(status)

    def set_target(self, note_name: str):
        """Select the note to tune against.

        Unknown names fall back to the default target. Changing the target
        clears the graph and restarts stability tracking.
        """
        with self._lock:
            self._target = self._resolve_target(note_name)
            self._graph.clear()
            self._reset_detection()
            logger.info("Target set to %s (%.2f Hz)", self._target.note_name, self._target.frequency_hz)
            status = self._status_if_changed()
        self._publish(status)

    def set_auto_mode(self, enabled: bool):
        """Switch between manual target selection and automatic string detection."""
        enabled = bool(enabled)
        fall_back = False
        with self._lock:
            if enabled == self._auto_mode:
                return
            self._auto_mode = enabled
            logger.info("Auto mode %s", "on" if enabled else "off")
            if enabled:
                # Unresolved until the next stable reading picks a string
                self._target = None
            else:
                fall_back = self._target is None or self._detected_frequency is None
            status = self._status_if_changed()

        if fall_back:
            self.set_target(DEFAULT_TARGET)
        else:
            self._publish(status)

    def attach_transport(self, transport):
        """Forward stable readings to `transport` (None detaches)."""
        with self._lock:
            self.transport = transport

    # ── Periodic activities ─────────────────────────────────────

    def sample_graph(self):
        """One graph tick: append exactly one point while active."""
        with self._lock:
            if self._state is not SessionState.ACTIVE:
                return
            cents = None
            if self._detected_frequency is not None and self._target is not None:
                cents = cents_deviation(self._detected_frequency, self._target.frequency_hz)
            self._graph.append(make_point(cents, self.clock()))

    def _on_samples(self, samples: np.ndarray, generation: int):
        if generation != self._generation or self._state is not SessionState.ACTIVE:
            logger.debug("Dropping buffer from stale generation %d", generation)
            return

        # Analysis runs outside the lock; only the result is applied under it
        candidate = self.pipeline.analyze(samples)
        self.apply_candidate(candidate, generation)

    def apply_candidate(self, candidate: PitchCandidate, generation: Optional[int] = None):
        """Run the stability filter on a candidate and update session state.

        `generation` is the value current when analysis started; a mismatch
        means the session was stopped or restarted meanwhile and the result is
        discarded.
        """
        send_to = None
        outgoing = None
        with self._lock:
            if generation is None:
                generation = self._generation
            if generation != self._generation or self._state is not SessionState.ACTIVE:
                logger.debug("Discarding stale analysis result %s", candidate)
                return

            self._last_candidate = candidate
            stable, self._stability = self.stability_filter.filter(candidate, self._stability)
            self._apply_stable_frequency(stable)
            status = self._status_if_changed()
            if stable is not None and self.transport is not None and self.transport.is_connected:
                send_to = self.transport
                outgoing = self._build_status()

        self._publish(status)
        if send_to is not None:
            try:
                send_to.send_status(outgoing)
            except Exception:
                logger.exception("Transport failed to send status")

    # ── Internals (caller holds the lock) ───────────────────────

    def _apply_stable_frequency(self, frequency: Optional[float]):
        if frequency is None:
            self._detected_frequency = None
            self._detected_note_name = None
            return

        self._detected_frequency = frequency
        note = closest_note(frequency)
        self._detected_note_name = note.name if note else None

        if self._auto_mode and note is not None and note.name in STANDARD_TUNING:
            if self._target is None or note.name != self._target.note_name:
                self._target = TuningTarget(note.name, note.frequency_hz)
                logger.info("Auto-tuned to %s (%.1f Hz)", note.name, note.frequency_hz)

    def _reset_detection(self):
        self._stability = INITIAL_STATE
        self._last_candidate = NO_PITCH
        self._detected_frequency = None
        self._detected_note_name = None

    def _resolve_target(self, note_name: str) -> TuningTarget:
        canonical = normalize_note_name(note_name)
        frequency = frequency_for_note(canonical) if canonical else None
        if frequency is None:
            logger.warning("Unknown target note %r, using %s", note_name, DEFAULT_TARGET)
            return _default_target()
        return TuningTarget(canonical, frequency)

    def _build_status(self) -> TuningStatus:
        cents = None
        if self._detected_frequency is not None and self._target is not None:
            cents = cents_deviation(self._detected_frequency, self._target.frequency_hz)
        return TuningStatus(
            detected_frequency=self._detected_frequency,
            detected_note_name=self._detected_note_name,
            cents_deviation=cents,
            target_note_name=self._target.note_name if self._target else None,
            target_frequency=self._target.frequency_hz if self._target else None,
            is_active=self._state is SessionState.ACTIVE,
            auto_mode=self._auto_mode,
        )

    def _status_if_changed(self) -> Optional[TuningStatus]:
        status = self._build_status()
        if status == self._last_published:
            return None
        self._last_published = status
        return status

    def _publish(self, status: Optional[TuningStatus]):
        if status is not None:
            self.events.publish(status)
