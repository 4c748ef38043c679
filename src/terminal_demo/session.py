"""Playback sessions: scheduled, cancellable rendering of a demo."""

from __future__ import annotations

from enum import Enum
from functools import partial
import itertools
import logging
from typing import Callable, Optional

from terminal_demo.catalog import Demo, DemoCatalog, DemoNotFound
from terminal_demo.renderer import LineRenderer
from terminal_demo.scheduling import Callback, Scheduler, TimerHandle
from terminal_demo.surface import Surface, SurfaceNotFound, SurfaceRegistry

logger = logging.getLogger(__name__)

CompletionCallback = Callable[["PlaybackSession"], None]


class SessionState(str, Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"


class PlaybackSession:
    """Pending work for one demo playing on one surface.

    Every timer the session creates (one per line plus the typing interval)
    is tracked in its pending set, so ``cancel`` stops all of it at once.
    """

    def __init__(
        self,
        surface: Surface,
        demo: Demo,
        *,
        scheduler: Scheduler,
        renderer: LineRenderer,
    ) -> None:
        self.surface = surface
        self.demo = demo
        self._scheduler = scheduler
        self._renderer = renderer
        self._pending: dict[int, TimerHandle] = {}
        self._line_tokens: dict[int, int] = {}
        self._rendered = [False] * len(demo.lines)
        self._tokens = itertools.count(1)
        self._listeners: list[CompletionCallback] = []
        self._cancelled = False
        self._completed = False

    @property
    def state(self) -> SessionState:
        return SessionState.SCHEDULED if self._pending else SessionState.IDLE

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def completed(self) -> bool:
        return self._completed

    def add_listener(self, callback: CompletionCallback) -> None:
        self._listeners.append(callback)

    def begin(self) -> None:
        """Clear the surface and schedule every line of the demo."""
        self.surface.clear()
        for index, line in enumerate(self.demo.lines):
            self._line_tokens[index] = self.schedule(
                line.delay_ms, partial(self._fire_line, index)
            )
        self._check_complete()

    def schedule(self, delay_ms: int, callback: Callback) -> int:
        """Run callback once after delay_ms; return its pending-set token."""
        token = next(self._tokens)

        def run() -> None:
            if self._pending.pop(token, None) is None:
                return
            self._run(callback)
            self._check_complete()

        self._pending[token] = self._scheduler.set_timer(delay_ms / 1000.0, run)
        return token

    def schedule_repeating(self, interval_ms: int, callback: Callback) -> int:
        """Run callback every interval_ms until released or cancelled."""
        token = next(self._tokens)

        def run() -> None:
            if token not in self._pending:
                return
            self._run(callback)
            self._check_complete()

        self._pending[token] = self._scheduler.set_interval(
            interval_ms / 1000.0, run
        )
        return token

    def release(self, token: int) -> None:
        """Stop one pending task and drop it from the pending set."""
        handle = self._pending.pop(token, None)
        if handle is not None:
            handle.stop()

    def cancel(self) -> None:
        """Stop all pending work. Safe to call repeatedly."""
        if not self._pending:
            return
        self._cancelled = True
        pending = list(self._pending.values())
        self._pending.clear()
        for handle in pending:
            handle.stop()
        logger.debug(
            "Cancelled %d pending task(s) for demo %s", len(pending), self.demo.name
        )

    def _run(self, callback: Callback) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Playback error in demo %s", self.demo.name)
            # The failing task may have been the last one pending.
            self._cancelled = True
            self.cancel()

    def _fire_line(self, index: int) -> None:
        line = self.demo.lines[index]
        # Earlier lines due at the same offset go first.
        for earlier in range(index):
            if self._rendered[earlier]:
                continue
            if self.demo.lines[earlier].delay_ms <= line.delay_ms:
                self.release(self._line_tokens[earlier])
                self._render(earlier)
        self._render(index)

    def _render(self, index: int) -> None:
        self._rendered[index] = True
        self._renderer.render(
            self.surface, self.demo.lines[index], index == 0, self
        )

    def _check_complete(self) -> None:
        if self._pending or self._cancelled or self._completed:
            return
        self._completed = True
        logger.debug("Demo %s finished", self.demo.name)
        for callback in list(self._listeners):
            callback(self)


class PlaybackEngine:
    """Start and cancel demo playback, one current session per surface."""

    def __init__(
        self,
        catalog: DemoCatalog,
        scheduler: Scheduler,
        *,
        registry: Optional[SurfaceRegistry] = None,
        renderer: Optional[LineRenderer] = None,
    ) -> None:
        self.catalog = catalog
        self.scheduler = scheduler
        self.registry = registry or SurfaceRegistry()
        self.renderer = renderer or LineRenderer()
        self._sessions: dict[int, PlaybackSession] = {}

    def start(
        self,
        surface: Surface,
        demo: Demo,
        *,
        on_complete: Optional[CompletionCallback] = None,
    ) -> PlaybackSession:
        self.cancel(surface)
        session = PlaybackSession(
            surface,
            demo,
            scheduler=self.scheduler,
            renderer=self.renderer,
        )
        self._sessions[id(surface)] = session
        session.add_listener(self._session_done)
        if on_complete is not None:
            session.add_listener(on_complete)
        logger.info("Playing demo %s (%d lines)", demo.name, len(demo))
        session.begin()
        return session

    def cancel(self, surface: Surface) -> None:
        session = self._sessions.pop(id(surface), None)
        if session is not None:
            session.cancel()

    def session_for(self, surface: Surface) -> Optional[PlaybackSession]:
        return self._sessions.get(id(surface))

    def is_active(self, surface: Surface) -> bool:
        session = self._sessions.get(id(surface))
        return session is not None and session.state is SessionState.SCHEDULED

    def play_demo(
        self,
        surface_id: str,
        demo_name: str,
        *,
        on_complete: Optional[CompletionCallback] = None,
    ) -> Optional[PlaybackSession]:
        """Resolve surface and demo, then start; unknown ids do nothing."""
        try:
            surface = self.registry.resolve(surface_id)
        except SurfaceNotFound:
            logger.debug("Surface %s not found; ignoring play request", surface_id)
            return None
        try:
            demo = self.catalog.require(demo_name)
        except DemoNotFound:
            logger.warning("Unknown demo %r requested for %s", demo_name, surface_id)
            return None
        return self.start(surface, demo, on_complete=on_complete)

    def _session_done(self, session: PlaybackSession) -> None:
        if self._sessions.get(id(session.surface)) is session:
            del self._sessions[id(session.surface)]
