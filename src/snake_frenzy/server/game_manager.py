"""In-memory session registry, tick scheduling, and state fan-out."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field

from snake_frenzy.config import GameConfig
from snake_frenzy.engine import GameEngine
from snake_frenzy.server.models import GameStatus, SessionSummary

logger = logging.getLogger(__name__)

_MAX_FINISHED_SESSIONS = 100
_SUBSCRIBER_QUEUE_SIZE = 64


@dataclass
class GameSession:
    """One engine plus the tasks that drive it and the clients watching it."""

    session_id: str
    engine: GameEngine
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    subscribers: list[asyncio.Queue] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    _motion_task: asyncio.Task | None = field(default=None, repr=False)
    _spawn_task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def config(self) -> GameConfig:
        return self.engine.config

    @property
    def status(self) -> GameStatus:
        if self.engine.game_over:
            return GameStatus.FINISHED
        if self.engine.running:
            return GameStatus.ACTIVE
        return GameStatus.WAITING

    @property
    def loops_alive(self) -> bool:
        return any(
            t is not None and not t.done()
            for t in (self._motion_task, self._spawn_task)
        )

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=_SUBSCRIBER_QUEUE_SIZE)
        self.subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self.subscribers:
            self.subscribers.remove(queue)

    def publish(self, state: dict) -> None:
        """Engine listener: hand the new state to every subscriber."""
        for queue in list(self.subscribers):
            if queue.full():
                # Slow consumer; keep the newest snapshot.
                queue.get_nowait()
            queue.put_nowait(state)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            status=self.status,
            grid_size=self.config.grid_size,
            length=len(self.engine.body),
            tick=self.engine.tick,
        )


class GameManager:
    """Central registry managing all game sessions.

    All engine mutations go through the session lock, so input, motion
    ticks, and spawn ticks never interleave inside a read-modify-write.
    """

    def __init__(self, max_finished_sessions: int = _MAX_FINISHED_SESSIONS) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        self._sessions: dict[str, GameSession] = {}
        self._max_finished_sessions = max_finished_sessions

    def create_session(self, config: GameConfig | None = None) -> GameSession:
        """Create a new idle session and return it."""
        engine = GameEngine(config)
        session = GameSession(session_id=uuid.uuid4().hex[:12], engine=engine)
        engine.add_listener(session.publish)
        self._sessions[session.session_id] = session
        logger.info(
            "Session %s created (grid=%d).",
            session.session_id, engine.config.grid_size,
        )
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def handle_key(self, session_id: str, code: int) -> bool:
        """Route a key press and start the tick loops if play began."""
        session = self.require_session(session_id)
        async with session.lock:
            accepted = session.engine.handle_key(code)
            if accepted and session.engine.running and not session.loops_alive:
                self._start_loops(session)
        return accepted

    async def toggle_obstacle(self, session_id: str, row: int, col: int) -> bool:
        session = self.require_session(session_id)
        async with session.lock:
            flag = session.engine.toggle_obstacle(row, col)
            self._after_change(session)
        return flag

    async def randomize_obstacles(self, session_id: str) -> dict:
        session = self.require_session(session_id)
        async with session.lock:
            session.engine.randomize_obstacles()
            self._after_change(session)
            return session.engine.get_state()

    async def clear_obstacles(self, session_id: str) -> dict:
        session = self.require_session(session_id)
        async with session.lock:
            session.engine.clear_obstacles()
            return session.engine.get_state()

    async def restart(self, session_id: str) -> dict:
        """Stop both tick loops, then reset the engine."""
        session = self.require_session(session_id)
        await self._stop_loops(session)
        async with session.lock:
            state = session.engine.restart()
            session.finished_at = None
        logger.info("Session %s restarted.", session_id)
        return state

    async def close_session(self, session_id: str) -> None:
        session = self.require_session(session_id)
        await self._stop_loops(session)
        session.engine.remove_listener(session.publish)
        self._sessions.pop(session_id, None)
        logger.info("Session %s closed.", session_id)

    def _start_loops(self, session: GameSession) -> None:
        cfg = session.config
        session._motion_task = asyncio.create_task(
            self._tick_loop(session, cfg.motion_interval_ms, session.engine.step),
        )
        if cfg.food_enabled:
            session._spawn_task = asyncio.create_task(
                self._tick_loop(
                    session, cfg.spawn_interval_ms, session.engine.spawn_food,
                ),
            )
        logger.info("Session %s started.", session.session_id)

    async def _stop_loops(self, session: GameSession) -> None:
        tasks = [
            t for t in (session._motion_task, session._spawn_task)
            if t is not None and not t.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        session._motion_task = None
        session._spawn_task = None

    async def _tick_loop(self, session: GameSession, interval_ms: int, tick) -> None:
        """Call *tick* every *interval_ms* while the engine is running."""
        interval = interval_ms / 1000.0
        try:
            while True:
                await asyncio.sleep(interval)
                async with session.lock:
                    # Checked at fire time: a restart may have happened
                    # while this tick was sleeping.
                    if not session.engine.running:
                        break
                    tick()
                    self._after_change(session)
        except asyncio.CancelledError:
            logger.debug("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)
            session.engine.running = False

    def _after_change(self, session: GameSession) -> None:
        if session.engine.game_over and session.finished_at is None:
            session.finished_at = time.monotonic()
            current = asyncio.current_task()
            for task in (session._motion_task, session._spawn_task):
                if task is not None and task is not current and not task.done():
                    task.cancel()
            logger.info(
                "Session %s finished at tick %d.",
                session.session_id, session.engine.tick,
            )
            self._prune_finished_sessions()

    def _prune_finished_sessions(self) -> None:
        """Bound retained finished sessions to avoid unbounded registry growth."""
        finished = [
            s for s in self._sessions.values()
            if s.status == GameStatus.FINISHED
        ]
        overflow = len(finished) - self._max_finished_sessions
        if overflow <= 0:
            return
        finished.sort(
            key=lambda s: s.finished_at if s.finished_at is not None else s.created_at,
        )
        for stale in finished[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow,
            self._max_finished_sessions,
        )

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        for session in list(self._sessions.values()):
            await self._stop_loops(session)
        logger.info("GameManager cleanup complete.")
