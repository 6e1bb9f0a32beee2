"""Tests for typed action models — alias handling and optional fields."""

import pytest
from pydantic import ValidationError

from hunyuan_sdk.models import (
    ChatCompletionsRequest,
    ChatCompletionsResponse,
    Message,
)
from hunyuan_sdk.types import ResponseEnvelope


class TestMessage:
    def test_creation(self):
        message = Message(role="user", content="Hello, world!")
        assert message.role == "user"
        assert message.content == "Hello, world!"

    def test_accepts_wire_names(self):
        message = Message.model_validate({"Role": "assistant", "Content": "hi"})
        assert message.role == "assistant"

    def test_dumps_wire_names(self):
        message = Message(role="user", content="Test message")
        assert message.model_dump(by_alias=True) == {"Role": "user", "Content": "Test message"}

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Message(role="robot", content="beep")


class TestChatCompletionsRequest:
    def test_creation(self):
        request = ChatCompletionsRequest(
            model="hunyuan-pro",
            messages=[Message(role="user", content="Hello")],
            temperature=0.7,
            top_p=0.9,
            max_tokens=256,
            stream=False,
        )
        assert request.model == "hunyuan-pro"
        assert len(request.messages) == 1
        assert request.temperature == 0.7
        assert request.top_p == 0.9
        assert request.max_tokens == 256
        assert request.stream is False

    def test_optional_fields_dropped_from_wire(self):
        request = ChatCompletionsRequest(messages=[Message(role="user", content="Test")])
        assert request.model_dump(by_alias=True, exclude_none=True) == {
            "Messages": [{"Role": "user", "Content": "Test"}]
        }

    def test_wire_round_trip_keeps_none(self):
        request = ChatCompletionsRequest(
            model="hunyuan-pro", messages=[Message(role="user", content="Test")]
        )
        restored = ChatCompletionsRequest.model_validate(request.model_dump(by_alias=True))
        assert restored.temperature is None
        assert restored.top_p is None
        assert restored.stream is None


class TestChatCompletionsResponse:
    def test_decode_envelope(self):
        envelope = ResponseEnvelope[ChatCompletionsResponse].model_validate(
            {
                "Response": {
                    "RequestId": "req-1",
                    "Id": "chat-1",
                    "Note": "generated",
                    "Choices": [
                        {
                            "Index": 0,
                            "Message": {"Role": "assistant", "Content": "Hi"},
                            "FinishReason": "stop",
                        }
                    ],
                    "Usage": {"PromptTokens": 1, "CompletionTokens": 1, "TotalTokens": 2},
                }
            }
        )
        response = envelope.response
        assert response.request_id == "req-1"
        assert response.id == "chat-1"
        assert response.note == "generated"
        assert response.choices[0].finish_reason == "stop"
        assert response.choices[0].message.role == "assistant"
        assert response.usage.prompt_tokens == 1

    def test_minimal_response(self):
        envelope = ResponseEnvelope[ChatCompletionsResponse].model_validate(
            {"Response": {"RequestId": "req-2"}}
        )
        assert envelope.response.choices is None
        assert envelope.response.usage is None
