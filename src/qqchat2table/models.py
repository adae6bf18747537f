"""Data models for parsed conversations."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    sender: str
    content: str = ""


class Conversation(BaseModel):
    group: str
    name: str
    messages: list[Message] = []

    @property
    def message_count(self) -> int:
        return len(self.messages)


class MessageBuilder:
    """Accumulates the body lines of the message currently being parsed.

    Trailing line terminators are trimmed once, when build() is called.
    """

    def __init__(self, timestamp: datetime, sender: str, multi_line: bool = True):
        self.timestamp = timestamp
        self.sender = sender
        self.multi_line = multi_line
        self._lines: list[str] = []

    def append(self, line: str):
        self._lines.append(line)

    def build(self) -> Message:
        joiner = "\n" if self.multi_line else ""
        content = joiner.join(self._lines).rstrip("\r\n")
        return Message(timestamp=self.timestamp, sender=self.sender, content=content)
