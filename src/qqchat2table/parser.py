"""Parse a QQ chat-history text export into conversations."""

from __future__ import annotations

import enum
import itertools
import logging
import re
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from .config import (
    GROUP_LABEL,
    GROUP_LABEL_OFFSET,
    PREAMBLE_LINES,
    SEPARATOR,
    SUBJECT_LABEL,
    SUBJECT_LABEL_OFFSET,
    TIMESTAMP_FORMAT,
)
from .models import Conversation, Message, MessageBuilder

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(
    r"^(?P<time>\d{4}-\d{2}-\d{2} \d{1,2}:\d{2}:\d{2}) (?P<sender>.+)$",
    re.ASCII,
)


class SeparatorPhase(enum.Enum):
    """Where the parser is within the separator / group / subject cycle."""

    AWAITING_BLOCK_START = 0
    AWAITING_GROUP_LABEL = 1
    AWAITING_SUBJECT_LABEL = 2

    def advance(self) -> SeparatorPhase:
        return _NEXT_PHASE[self]


_NEXT_PHASE = {
    SeparatorPhase.AWAITING_BLOCK_START: SeparatorPhase.AWAITING_GROUP_LABEL,
    SeparatorPhase.AWAITING_GROUP_LABEL: SeparatorPhase.AWAITING_SUBJECT_LABEL,
    SeparatorPhase.AWAITING_SUBJECT_LABEL: SeparatorPhase.AWAITING_BLOCK_START,
}


class _RecordParser:
    """Line-by-line state for a single parse."""

    def __init__(self, multi_line: bool):
        self.multi_line = multi_line
        self.phase = SeparatorPhase.AWAITING_BLOCK_START
        self.line_number = 0
        self.group = ""
        self.name = ""
        self.current: MessageBuilder | None = None
        self.messages: list[Message] = []
        self.conversations: list[Conversation] = []

    def feed(self, line: str):
        self.line_number += 1

        if line == SEPARATOR:
            if self.phase is SeparatorPhase.AWAITING_BLOCK_START:
                self._close_conversation()
            self.phase = self.phase.advance()
            return

        if self.phase is SeparatorPhase.AWAITING_GROUP_LABEL:
            if line.startswith(GROUP_LABEL):
                self.group = line[GROUP_LABEL_OFFSET:]
            elif line.startswith(SUBJECT_LABEL):
                # Both labels share one section; the next separator opens the body
                self.name = line[SUBJECT_LABEL_OFFSET:]
                self.phase = SeparatorPhase.AWAITING_SUBJECT_LABEL
            else:
                logger.warning(
                    "Line %d: expected a group label, got %r", self.line_number, line
                )
            return

        if self.phase is SeparatorPhase.AWAITING_SUBJECT_LABEL:
            if line.startswith(SUBJECT_LABEL):
                self.name = line[SUBJECT_LABEL_OFFSET:]
            else:
                logger.warning(
                    "Line %d: expected a subject label, got %r", self.line_number, line
                )
            return

        match = HEADER_PATTERN.match(line)
        if match:
            self._flush_message()
            self.current = MessageBuilder(
                timestamp=self._parse_timestamp(match.group("time")),
                sender=match.group("sender"),
                multi_line=self.multi_line,
            )
            return

        # Body lines before the first header of a block have no owner
        if self.current is not None:
            self.current.append(line)

    def finish(self) -> list[Conversation]:
        self._close_conversation()
        return self.conversations

    def _parse_timestamp(self, text: str) -> datetime:
        try:
            return datetime.strptime(text, TIMESTAMP_FORMAT)
        except ValueError as exc:
            raise ValueError(
                f"Line {self.line_number}: invalid message timestamp {text!r}"
            ) from exc

    def _flush_message(self):
        if self.current is not None:
            self.messages.append(self.current.build())
            self.current = None

    def _close_conversation(self):
        self._flush_message()
        if not self.messages:
            return
        conversation = Conversation(group=self.group, name=self.name, messages=self.messages)
        self.conversations.append(conversation)
        logger.info(
            "Parsed %s-%s (%d messages)", self.group, self.name, len(self.messages)
        )
        self.messages = []


def parse_records(lines: Iterable[str], multi_line: bool = True) -> list[Conversation]:
    """Parse export lines into conversations, in file order.

    The first PREAMBLE_LINES lines are skipped. Blocks without any message
    produce no Conversation.
    """
    state = _RecordParser(multi_line)
    for line in itertools.islice(lines, PREAMBLE_LINES, None):
        state.feed(line.rstrip("\r\n"))
    return state.finish()


def parse_export(
    path: Path | str, multi_line: bool = True, encoding: str = "utf-8-sig"
) -> list[Conversation]:
    """Parse an export file from disk."""
    with Path(path).open("r", encoding=encoding) as f:
        return parse_records(f, multi_line=multi_line)
