"""Typed request/response models for individual actions.

Wire names are PascalCase; the models expose snake_case attributes and
accept either form on input.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hunyuan_sdk.types import ActionResponse


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# ChatCompletions
# ---------------------------------------------------------------------------


class Message(_WireModel):
    role: Literal["system", "user", "assistant", "tool"] = Field(alias="Role")
    content: str = Field(alias="Content")


class ChatCompletionsRequest(_WireModel):
    model: str | None = Field(default=None, alias="Model")
    messages: list[Message] = Field(alias="Messages")
    temperature: float | None = Field(default=None, alias="Temperature")
    top_p: float | None = Field(default=None, alias="TopP")
    max_tokens: int | None = Field(default=None, alias="MaxTokens")
    stream: bool | None = Field(default=None, alias="Stream")


class ChatChoiceMessage(_WireModel):
    role: str | None = Field(default=None, alias="Role")
    content: str | None = Field(default=None, alias="Content")


class ChatChoice(_WireModel):
    index: int | None = Field(default=None, alias="Index")
    message: ChatChoiceMessage | None = Field(default=None, alias="Message")
    finish_reason: str | None = Field(default=None, alias="FinishReason")


class Usage(_WireModel):
    prompt_tokens: int | None = Field(default=None, alias="PromptTokens")
    completion_tokens: int | None = Field(default=None, alias="CompletionTokens")
    total_tokens: int | None = Field(default=None, alias="TotalTokens")


class ChatCompletionsResponse(ActionResponse):
    id: str | None = Field(default=None, alias="Id")
    created: int | None = Field(default=None, alias="Created")
    note: str | None = Field(default=None, alias="Note")
    choices: list[ChatChoice] | None = Field(default=None, alias="Choices")
    usage: Usage | None = Field(default=None, alias="Usage")
