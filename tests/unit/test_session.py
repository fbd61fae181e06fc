"""Unit tests for ChatSession and the turn data types."""

import pytest

from finchat_server.sessions import ChatSession, ToolInvocation, ToolOutcome, Turn


@pytest.fixture
def session():
    return ChatSession(session_id="abc1234567", model="llama3.2:latest")


class TestTurn:
    """Tests for Turn construction rules."""

    def test_plain_turn(self):
        turn = Turn(turn_id=1, role="user", content="Hello")

        assert turn.tool_calls is None
        assert turn.timestamp.endswith("Z")

    def test_turn_is_immutable(self):
        turn = Turn(turn_id=1, role="user", content="Hello")

        with pytest.raises(AttributeError):
            turn.content = "changed"

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError, match="Unknown turn role"):
            Turn(turn_id=1, role="system", content="x")

    def test_calls_and_results_must_pair(self):
        with pytest.raises(ValueError, match="2 tool calls but 1 tool results"):
            Turn(
                turn_id=2,
                role="assistant",
                content="Done",
                tool_calls=(ToolInvocation("sum"), ToolInvocation("sum")),
                tool_results=(ToolOutcome.success("sum", 1),),
            )

    def test_tool_turn_needs_final_text(self):
        with pytest.raises(ValueError, match="no final text"):
            Turn(
                turn_id=2,
                role="assistant",
                content="  ",
                tool_calls=(ToolInvocation("sum"),),
                tool_results=(ToolOutcome.success("sum", 1),),
            )

    def test_to_dict(self):
        turn = Turn(
            turn_id=2,
            role="assistant",
            content="62",
            timestamp="2024-01-01T00:00:00Z",
            tool_calls=(ToolInvocation("sum", {"num1": 25, "num2": 37}),),
            tool_results=(ToolOutcome.success("sum", 62),),
        )

        assert turn.to_dict() == {
            "turn_id": 2,
            "role": "assistant",
            "content": "62",
            "timestamp": "2024-01-01T00:00:00Z",
            "tool_calls": [{"name": "sum", "arguments": {"num1": 25, "num2": 37}}],
            "tool_results": [{"name": "sum", "result": 62, "error": None}],
        }


class TestToolOutcome:
    def test_success_response(self):
        outcome = ToolOutcome.success("primeNumber", True)

        assert outcome.ok
        assert outcome.to_response() == {"result": True}

    def test_failure_response(self):
        outcome = ToolOutcome.failure("news", "News API key not configured")

        assert not outcome.ok
        assert outcome.result is None
        assert outcome.to_response() == {"error": "News API key not configured"}


class TestChatSession:
    """Tests for the append-only turn log."""

    def test_new_session_is_empty(self, session):
        assert session.turns == []
        assert session.is_loading is False
        assert session.error is None
        assert session.metadata.turn_count == 0

    def test_turn_ids_increase(self, session):
        first = session.add_user_turn("Hi")
        second = session.add_assistant_turn("Hello!")

        assert (first.turn_id, second.turn_id) == (1, 2)
        assert session.metadata.turn_count == 2
        assert session.metadata.updated_at == second.timestamp

    def test_assistant_turn_with_tools(self, session):
        turn = session.add_assistant_turn(
            "The sum is 62.",
            tool_calls=[ToolInvocation("sum", {"num1": 25, "num2": 37})],
            tool_results=[ToolOutcome.success("sum", 62)],
        )

        assert turn.tool_calls == (ToolInvocation("sum", {"num1": 25, "num2": 37}),)
        assert turn.tool_results[0].result == 62

    def test_assistant_turn_with_mismatched_tools_is_not_appended(self, session):
        with pytest.raises(ValueError):
            session.add_assistant_turn(
                "x", tool_calls=[ToolInvocation("sum")], tool_results=[]
            )

        assert session.turns == []

    def test_history_is_a_snapshot(self, session):
        session.add_user_turn("Hi")
        snapshot = session.history()

        session.add_assistant_turn("Hello!")

        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)

    def test_flattened_history_drops_tool_data(self, session):
        session.add_user_turn("Sum 25 and 37")
        session.add_assistant_turn(
            "62",
            tool_calls=[ToolInvocation("sum", {"num1": 25, "num2": 37})],
            tool_results=[ToolOutcome.success("sum", 62)],
        )

        assert session.flattened_history() == [
            {"role": "user", "content": "Sum 25 and 37"},
            {"role": "assistant", "content": "62"},
        ]

    def test_clear(self, session):
        session.add_user_turn("Hi")
        session.error = "Failed to get response from model: boom"
        generation = session.generation

        session.clear()

        assert session.turns == []
        assert session.error is None
        assert session.generation == generation + 1
        assert session.metadata.turn_count == 0

    def test_clear_twice_is_harmless(self, session):
        session.clear()
        session.clear()

        assert session.turns == []
        assert session.error is None

    def test_turn_ids_keep_increasing_after_clear(self, session):
        session.add_user_turn("Hi")
        session.clear()

        assert session.add_user_turn("Again").turn_id == 2

    def test_preview(self, session):
        assert session.get_preview() == ""

        session.add_user_turn("x" * 150)

        preview = session.get_preview()
        assert len(preview) == 100
        assert preview.endswith("...")

    def test_generate_session_id(self):
        session_id = ChatSession.generate_session_id()

        assert len(session_id) == 10
        int(session_id, 16)
        assert session_id != ChatSession.generate_session_id()
