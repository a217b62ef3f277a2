"""Unit tests for the call session model."""
from datetime import datetime, timedelta, timezone

from app.services.call_session.models import CallSession, CallStatus, Role

START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_session() -> CallSession:
    return CallSession(call_id="call-1", created_at=START)


class TestCallSession:
    """Test CallSession state handling."""

    def test_new_session_defaults(self):
        session = make_session()

        assert session.status == CallStatus.ACTIVE
        assert session.is_active
        assert session.conversation_history == []
        assert session.tool_memory == []
        assert session.customer_info == {}
        assert session.booking_details == {}
        assert session.ended_at is None
        assert session.call_duration == 0

    def test_add_message_appends_in_order(self):
        session = make_session()
        later = START + timedelta(seconds=5)

        session.add_message(Role.CUSTOMER, "Hi", START)
        session.add_message(Role.ASSISTANT, "Hello!", later)

        assert [turn.content for turn in session.conversation_history] == ["Hi", "Hello!"]
        assert session.conversation_history[0].role == Role.CUSTOMER
        assert session.last_activity == later

    def test_conversation_for_llm_maps_customer_to_user(self):
        session = make_session()
        session.add_message(Role.CUSTOMER, "Any flights?", START)
        session.add_message(Role.ASSISTANT, "Let me check.", START)

        assert session.get_conversation_for_llm() == [
            {"role": "user", "content": "Any flights?"},
            {"role": "assistant", "content": "Let me check."},
        ]

    def test_customer_info_merge(self):
        session = make_session()

        session.update_customer_info({"name": "Ana"})
        session.update_customer_info({"destination": "LAX"})
        session.update_customer_info({"name": "Ana Lopez"})

        assert session.customer_info == {"name": "Ana Lopez", "destination": "LAX"}

    def test_customer_info_merge_is_idempotent(self):
        session = make_session()

        session.update_customer_info({"a": 1})
        session.update_customer_info({"a": 1})

        assert session.customer_info == {"a": 1}

    def test_booking_details_merge_is_separate(self):
        session = make_session()

        session.update_booking_details({"type": "hotel"})
        session.update_booking_details({"nights": 2})

        assert session.booking_details == {"type": "hotel", "nights": 2}
        assert session.customer_info == {}

    def test_recent_tool_results_keeps_last_entries(self):
        session = make_session()
        for i in range(5):
            session.add_tool_result("checkFlightPrices", {"success": True, "data": {"n": i}}, START)

        recent = session.recent_tool_results(3)

        assert [entry.result["data"]["n"] for entry in recent] == [2, 3, 4]
        assert len(session.tool_memory) == 5

    def test_end_call_computes_duration(self):
        session = make_session()

        duration = session.end_call(START + timedelta(seconds=42, milliseconds=900))

        assert duration == 42
        assert session.status == CallStatus.ENDED
        assert session.call_duration == 42
        assert session.ended_at == START + timedelta(seconds=42, milliseconds=900)

    def test_end_call_only_once(self):
        session = make_session()
        session.end_call(START + timedelta(seconds=10))

        duration = session.end_call(START + timedelta(seconds=99))

        assert duration == 10
        assert session.ended_at == START + timedelta(seconds=10)
        assert session.status == CallStatus.ENDED
