"""Tests for session scheduling: tick loops, cancellation, and fan-out."""

from __future__ import annotations

import asyncio

import pytest

from snake_frenzy.config import GameConfig
from snake_frenzy.server.game_manager import GameManager
from snake_frenzy.server.models import GameStatus


async def _wait_for(predicate, attempts: int = 200, delay: float = 0.01) -> bool:
    for _ in range(attempts):
        if predicate():
            return True
        await asyncio.sleep(delay)
    return predicate()


class TestSessionRegistry:
    def test_create_and_get(self):
        manager = GameManager()
        session = manager.create_session(GameConfig(grid_size=10))
        assert manager.get_session(session.session_id) is session
        assert session.status == GameStatus.WAITING
        assert len(manager.list_sessions()) == 1

    def test_unknown_session(self):
        manager = GameManager()
        assert manager.get_session("missing") is None
        with pytest.raises(KeyError):
            manager.require_session("missing")

    def test_invalid_retention(self):
        with pytest.raises(ValueError, match=">= 0"):
            GameManager(max_finished_sessions=-1)


class TestTickLoops:
    @pytest.mark.asyncio
    async def test_unknown_key_does_not_start(self):
        manager = GameManager()
        session = manager.create_session(GameConfig(motion_interval_ms=5))
        assert not await manager.handle_key(session.session_id, 65)
        assert not session.loops_alive
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_key_starts_motion_and_food(self):
        manager = GameManager()
        session = manager.create_session(
            GameConfig(grid_size=20, motion_interval_ms=5, spawn_interval_ms=5),
        )
        assert await manager.handle_key(session.session_id, 39)
        assert session.status == GameStatus.ACTIVE
        assert session.loops_alive
        assert await _wait_for(lambda: session.engine.tick >= 3)
        assert await _wait_for(lambda: len(session.engine.food) >= 1)
        await manager.cleanup()
        assert not session.loops_alive

    @pytest.mark.asyncio
    async def test_food_disabled_runs_motion_only(self):
        manager = GameManager()
        session = manager.create_session(
            GameConfig(grid_size=20, motion_interval_ms=5, food_enabled=False),
        )
        await manager.handle_key(session.session_id, 40)
        assert await _wait_for(lambda: session.engine.tick >= 3)
        assert session.engine.food == frozenset()
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_termination_stops_both_loops(self):
        manager = GameManager()
        session = manager.create_session(
            GameConfig(grid_size=10, motion_interval_ms=5, spawn_interval_ms=5),
        )
        session.engine.body = ((5, 5),)
        await manager.toggle_obstacle(session.session_id, 2, 5)
        await manager.handle_key(session.session_id, 38)

        assert await _wait_for(lambda: session.engine.game_over)
        assert await _wait_for(lambda: not session.loops_alive)
        assert session.status == GameStatus.FINISHED
        assert session.finished_at is not None
        tick = session.engine.tick
        await asyncio.sleep(0.05)
        assert session.engine.tick == tick

    @pytest.mark.asyncio
    async def test_restart_cancels_loops_before_reset(self):
        manager = GameManager()
        session = manager.create_session(
            GameConfig(grid_size=20, motion_interval_ms=20, spawn_interval_ms=20),
        )
        await manager.handle_key(session.session_id, 39)
        assert await _wait_for(lambda: session.engine.tick >= 1)

        state = await manager.restart(session.session_id)
        assert not session.loops_alive
        assert state["tick"] == 0
        assert state["running"] is False
        assert state["food"] == []

        # No stale tick may touch the fresh state.
        await asyncio.sleep(0.1)
        assert session.engine.tick == 0
        assert session.engine.food == frozenset()

    @pytest.mark.asyncio
    async def test_play_again_after_restart(self):
        manager = GameManager()
        session = manager.create_session(GameConfig(motion_interval_ms=5))
        session.engine.body = ((5, 5),)
        await manager.toggle_obstacle(session.session_id, 5, 5)
        assert session.engine.game_over
        assert not await manager.handle_key(session.session_id, 38)

        await manager.restart(session.session_id)
        assert await manager.handle_key(session.session_id, 38)
        assert await _wait_for(lambda: session.engine.tick >= 2)
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_zero_interval_runs(self):
        manager = GameManager()
        session = manager.create_session(
            GameConfig(grid_size=10, motion_interval_ms=0, spawn_interval_ms=0),
        )
        await manager.handle_key(session.session_id, 37)
        assert await _wait_for(lambda: session.engine.tick >= 10 or session.engine.game_over)
        await manager.cleanup()


class TestFanOut:
    @pytest.mark.asyncio
    async def test_subscriber_receives_states(self):
        manager = GameManager()
        session = manager.create_session(GameConfig(motion_interval_ms=5))
        queue = session.subscribe()
        await manager.handle_key(session.session_id, 38)
        first = await asyncio.wait_for(queue.get(), timeout=1.0)
        assert first["running"] is True
        second = await asyncio.wait_for(queue.get(), timeout=1.0)
        assert second["tick"] >= 0
        session.unsubscribe(queue)
        await manager.cleanup()

    def test_full_queue_keeps_newest(self):
        manager = GameManager()
        session = manager.create_session(GameConfig())
        queue = session.subscribe()
        for i in range(queue.maxsize + 5):
            session.publish({"tick": i})
        assert queue.qsize() == queue.maxsize
        last = None
        while not queue.empty():
            last = queue.get_nowait()
        assert last == {"tick": queue.maxsize + 4}


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_close_session(self):
        manager = GameManager()
        session = manager.create_session(GameConfig(motion_interval_ms=5))
        await manager.handle_key(session.session_id, 38)
        await manager.close_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert not session.loops_alive

    @pytest.mark.asyncio
    async def test_finished_sessions_pruned(self):
        manager = GameManager(max_finished_sessions=1)
        ids = []
        for _ in range(3):
            session = manager.create_session(GameConfig())
            session.engine.body = ((1, 1),)
            await manager.toggle_obstacle(session.session_id, 1, 1)
            ids.append(session.session_id)
        remaining = [sid for sid in ids if manager.get_session(sid) is not None]
        assert remaining == [ids[-1]]

    @pytest.mark.asyncio
    async def test_many_concurrent_sessions_finish(self):
        """Run 30 sessions at once; each snake walks into an obstacle."""
        manager = GameManager()
        sessions = []
        for i in range(30):
            session = manager.create_session(
                GameConfig(grid_size=10, motion_interval_ms=5, seed=i),
            )
            session.engine.body = ((5, 5),)
            await manager.toggle_obstacle(session.session_id, 5, 8)
            sessions.append(session)

        for session in sessions:
            await manager.handle_key(session.session_id, 39)

        assert await _wait_for(
            lambda: all(s.engine.game_over for s in sessions), attempts=300,
        )
        assert all(s.engine.head == (5, 8) for s in sessions)
        await manager.cleanup()
