"""Tests for the conversation data models."""
from datetime import datetime

import pytest
from pydantic import ValidationError

from qqchat2table.models import Conversation, Message, MessageBuilder


class TestMessageBuilder:
    """Tests for MessageBuilder."""

    @pytest.fixture
    def timestamp(self):
        return datetime(2023, 1, 5, 9, 30)

    def test_no_body_lines_gives_empty_content(self, timestamp):
        msg = MessageBuilder(timestamp, "Alice").build()

        assert msg.content == ""
        assert msg.sender == "Alice"
        assert msg.timestamp == timestamp

    def test_multi_line_joins_with_newline(self, timestamp):
        builder = MessageBuilder(timestamp, "Alice", multi_line=True)
        builder.append("first")
        builder.append("second")

        assert builder.build().content == "first\nsecond"

    def test_single_line_concatenates(self, timestamp):
        builder = MessageBuilder(timestamp, "Alice", multi_line=False)
        builder.append("first")
        builder.append("second")

        assert builder.build().content == "firstsecond"

    def test_only_trailing_terminators_are_trimmed(self, timestamp):
        builder = MessageBuilder(timestamp, "Alice")
        for line in ["  a\r", "", "b  ", "\r", ""]:
            builder.append(line)

        assert builder.build().content == "  a\r\n\nb  "


class TestModels:
    """Tests for Message and Conversation."""

    def test_message_is_immutable(self):
        msg = Message(timestamp=datetime(2023, 1, 5), sender="Alice", content="hi")

        with pytest.raises(ValidationError):
            msg.content = "changed"

    def test_message_count(self):
        msg = Message(timestamp=datetime(2023, 1, 5), sender="Alice")
        conv = Conversation(group="Friends", name="Alice", messages=[msg, msg])

        assert conv.message_count == 2
        assert Conversation(group="g", name="n").messages == []
