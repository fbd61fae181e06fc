"""Integration tests for the non-streaming chat endpoint."""

import asyncio
import json

import pytest


class TestChatEndpoint:
    """Tests for POST /api/v1/chat/{session_id}."""

    @pytest.mark.asyncio
    async def test_direct_answer(
        self, async_client, create_session, mock_ollama_client, text_reply
    ):
        session_id = await create_session()
        mock_ollama_client.chat.side_effect = [text_reply("Hello! How can I help?")]

        response = await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "Hi"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == session_id
        assert data["turn"]["role"] == "assistant"
        assert data["turn"]["content"] == "Hello! How can I help?"
        assert data["turn"]["tool_calls"] is None

    @pytest.mark.asyncio
    async def test_tool_cycle(
        self, async_client, create_session, mock_ollama_client, text_reply, tool_reply
    ):
        session_id = await create_session()
        mock_ollama_client.chat.side_effect = [
            tool_reply(("sum", {"num1": 25, "num2": 37})),
            text_reply("25 plus 37 is 62."),
        ]

        response = await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "Sum 25 and 37"}
        )

        assert response.status_code == 200
        turn = response.json()["turn"]
        assert "62" in turn["content"]
        assert turn["tool_calls"] == [
            {"name": "sum", "arguments": {"num1": 25, "num2": 37}}
        ]
        assert turn["tool_results"] == [{"name": "sum", "result": 62, "error": None}]

        second_call = mock_ollama_client.chat.call_args_list[1].kwargs
        assert second_call["messages"][-1] == {
            "role": "tool",
            "tool_name": "sum",
            "content": json.dumps({"result": 62}),
        }
        assert {t["function"]["name"] for t in second_call["tools"]} == {
            "sum",
            "primeNumber",
            "cryptoPrice",
            "news",
            "dcfValuation",
            "currencyConversion",
        }

    @pytest.mark.asyncio
    async def test_unknown_tool_is_reported_inline(
        self, async_client, create_session, mock_ollama_client, text_reply, tool_reply
    ):
        session_id = await create_session()
        mock_ollama_client.chat.side_effect = [
            tool_reply(("weather", {"city": "Oslo"}), ("primeNumber", {"number": 97})),
            text_reply("I can't check weather, but 97 is prime."),
        ]

        response = await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "Weather, and is 97 prime?"}
        )

        assert response.status_code == 200
        results = response.json()["turn"]["tool_results"]
        assert results == [
            {"name": "weather", "result": None, "error": "Tool weather not found"},
            {"name": "primeNumber", "result": True, "error": None},
        ]

    @pytest.mark.asyncio
    async def test_empty_message(self, async_client, create_session, mock_ollama_client):
        session_id = await create_session()

        response = await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "   "}
        )

        assert response.status_code == 200
        assert response.json() == {"session_id": session_id, "turn": None}
        mock_ollama_client.chat.assert_not_called()

    @pytest.mark.asyncio
    async def test_nonexistent_session(self, async_client):
        response = await async_client.post("/api/v1/chat/nope", json={"message": "Hi"})

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "session_not_found"

    @pytest.mark.asyncio
    async def test_missing_message_is_validation_error(self, async_client, create_session):
        session_id = await create_session()

        response = await async_client.post(f"/api/v1/chat/{session_id}", json={})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_model_error(self, async_client, create_session, mock_ollama_client):
        session_id = await create_session()
        mock_ollama_client.chat.side_effect = ConnectionError("connection refused")

        response = await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "Hi"}
        )

        assert response.status_code == 502
        error = response.json()["detail"]["error"]
        assert error["code"] == "model_error"
        assert "Failed to get response from model" in error["message"]

        session = (await async_client.get(f"/api/v1/sessions/{session_id}")).json()
        assert session["error"] == error["message"]
        assert session["is_loading"] is False
        assert [t["role"] for t in session["turns"]] == ["user"]

    @pytest.mark.asyncio
    async def test_error_cleared_by_next_success(
        self, async_client, create_session, mock_ollama_client, text_reply
    ):
        session_id = await create_session()
        mock_ollama_client.chat.side_effect = [RuntimeError("down"), text_reply("Back")]

        await async_client.post(f"/api/v1/chat/{session_id}", json={"message": "Hi"})
        response = await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "Again"}
        )

        assert response.status_code == 200
        session = (await async_client.get(f"/api/v1/sessions/{session_id}")).json()
        assert session["error"] is None

    @pytest.mark.asyncio
    async def test_busy_session(
        self, async_client, create_session, mock_ollama_client, text_reply
    ):
        session_id = await create_session()
        gate = asyncio.Event()

        async def slow_chat(**kwargs):
            await gate.wait()
            return text_reply("Done")

        mock_ollama_client.chat.side_effect = slow_chat
        first = asyncio.create_task(
            async_client.post(f"/api/v1/chat/{session_id}", json={"message": "First"})
        )
        await asyncio.sleep(0.05)

        response = await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "Second"}
        )

        assert response.status_code == 409
        assert response.json()["detail"]["error"]["code"] == "session_busy"

        gate.set()
        assert (await first).status_code == 200

    @pytest.mark.asyncio
    async def test_multiple_turns_keep_history(
        self, async_client, create_session, mock_ollama_client, text_reply
    ):
        session_id = await create_session()
        mock_ollama_client.chat.side_effect = [
            text_reply("Hi Ada."),
            text_reply("Your name is Ada."),
        ]

        await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "I'm Ada"}
        )
        await async_client.post(
            f"/api/v1/chat/{session_id}", json={"message": "What's my name?"}
        )

        messages = mock_ollama_client.chat.call_args_list[1].kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        turns = (await async_client.get(f"/api/v1/sessions/{session_id}/turns")).json()
        assert [t["turn_id"] for t in turns["turns"]] == [1, 2, 3, 4]
