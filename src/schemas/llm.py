"""Partial models of an OpenAI-style chat completion response.

Every field is optional: the provider's reply is untrusted, so the draft
pipeline checks each level for presence before using it instead of assuming
a shape. Unknown fields are ignored.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str

    model_config = ConfigDict(extra="forbid")


class CompletionMessage(BaseModel):
    role: str | None = None
    # Kept as Any so a non-string content reads as "no content" rather than
    # a schema failure.
    content: Any = None

    model_config = ConfigDict(extra="ignore")


class CompletionChoice(BaseModel):
    index: int | None = None
    message: CompletionMessage | None = None
    finish_reason: str | None = None

    model_config = ConfigDict(extra="ignore")


class ChatCompletion(BaseModel):
    id: str | None = None
    model: str | None = None
    choices: list[CompletionChoice] | None = None

    model_config = ConfigDict(extra="ignore")

    def first_content(self) -> str:
        """Text of the first choice, or "" when any level is missing."""
        if not self.choices:
            return ""
        message = self.choices[0].message
        if message is None or not isinstance(message.content, str):
            return ""
        return message.content
