"""Unit tests for the in-memory session store."""
import asyncio

import pytest

from app.core.exceptions import CallNotFoundError
from app.services.call_session.models import CallStatus


class TestSessionStore:
    """Test session lookup, creation and expiry."""

    def test_resolve_creates_session_once(self, store, clock):
        first = store.resolve("c1")
        second = store.resolve("c1")

        assert first is second
        assert first.status == CallStatus.ACTIVE
        assert first.created_at == clock()
        assert len(store) == 1

    def test_get_does_not_create(self, store):
        assert store.get("missing") is None
        assert len(store) == 0

    def test_sessions_are_independent(self, store):
        store.resolve("a").update_customer_info({"name": "A"})
        store.resolve("b").update_customer_info({"name": "B"})

        assert store.get("a").customer_info == {"name": "A"}
        assert store.get("b").customer_info == {"name": "B"}
        assert store.active_count() == 2

    def test_remove(self, store):
        store.resolve("c1")

        store.remove("c1")

        assert "c1" not in store
        assert store.get("c1") is None

    def test_ended_session_survives_grace_window(self, store, clock):
        session = store.resolve("c1")
        session.end_call(clock())
        store.schedule_removal("c1")

        clock.advance(59)

        assert store.get("c1") is session
        assert store.active_count() == 1

    def test_ended_session_purged_after_grace_window(self, store, clock):
        session = store.resolve("c1")
        session.end_call(clock())
        store.schedule_removal("c1")

        clock.advance(60)

        assert store.get("c1") is None
        assert store.active_count() == 0

    def test_resolve_after_purge_starts_fresh_call(self, store, clock):
        old = store.resolve("c1")
        old.end_call(clock())
        store.schedule_removal("c1")
        clock.advance(61)

        new = store.resolve("c1")

        assert new is not old
        assert new.status == CallStatus.ACTIVE

    def test_schedule_removal_unknown_call_is_noop(self, store, clock):
        store.schedule_removal("ghost")
        clock.advance(120)

        assert store.purge_expired() == 0

    @pytest.mark.asyncio
    async def test_mutate_yields_resolved_session(self, store):
        async with store.mutate("c1") as session:
            session.update_customer_info({"seat": "aisle"})

        assert store.get("c1").customer_info == {"seat": "aisle"}

    @pytest.mark.asyncio
    async def test_mutate_serializes_turns_in_arrival_order(self, store):
        order = []
        release = asyncio.Event()

        async def first():
            async with store.mutate("c1") as session:
                await release.wait()
                session.update_customer_info({"step": 1})
                order.append("first")

        async def second():
            async with store.mutate("c1") as session:
                session.update_customer_info({"step": 2})
                order.append("second")

        first_task = asyncio.create_task(first())
        await asyncio.sleep(0)
        second_task = asyncio.create_task(second())
        await asyncio.sleep(0)

        assert order == []

        release.set()
        await asyncio.gather(first_task, second_task)

        assert order == ["first", "second"]
        assert store.get("c1").customer_info == {"step": 2}

    @pytest.mark.asyncio
    async def test_mutate_does_not_block_other_calls(self, store):
        release = asyncio.Event()
        done = []

        async def slow():
            async with store.mutate("slow"):
                await release.wait()
                done.append("slow")

        async def fast():
            async with store.mutate("fast"):
                done.append("fast")

        slow_task = asyncio.create_task(slow())
        await asyncio.sleep(0)
        await fast()

        assert done == ["fast"]

        release.set()
        await slow_task
        assert done == ["fast", "slow"]

    @pytest.mark.asyncio
    async def test_lookup_only_mutate_does_not_create(self, store):
        async with store.mutate("ghost", create=False) as session:
            assert session is None

        assert "ghost" not in store


class TestEndCallUnderLock:
    """Test forced hangups that race with the grace-window purge."""

    @pytest.mark.asyncio
    async def test_end_call_purged_while_waiting_is_not_found(self, session_manager, store, clock):
        store.resolve("c1")

        async with store.mutate("c1") as session:
            pending = asyncio.create_task(session_manager.end_call("c1"))
            await asyncio.sleep(0)
            session.end_call(clock())
            store.schedule_removal("c1")
            clock.advance(61)

        with pytest.raises(CallNotFoundError):
            await pending

        assert "c1" not in store
