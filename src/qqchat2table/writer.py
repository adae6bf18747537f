"""CSV table output, one file per conversation."""

from __future__ import annotations

import csv
import logging
import shutil
from pathlib import Path

from .config import (
    CSV_HEADER,
    FILE_NAME_REPLACEMENT,
    OUTPUT_ENCODING,
    RECENT_GROUP_NAME,
    TIMESTAMP_FORMAT,
    Settings,
)
from .models import Conversation, Message

logger = logging.getLogger(__name__)

# Characters rejected in file names on Windows, a superset of POSIX's
INVALID_FILE_NAME_CHARS = frozenset('"<>|:*?\\/') | frozenset(chr(i) for i in range(32))


def sanitize_file_name(name: str, replacement: str = FILE_NAME_REPLACEMENT) -> str:
    """Replace every character that is illegal in a file name."""
    return "".join(replacement if c in INVALID_FILE_NAME_CHARS else c for c in name)


def render_file_name(template: str, conversation: Conversation) -> str:
    """Fill {Group} and {Name} in template, then sanitize the result."""
    name = template.replace("{Group}", conversation.group).replace("{Name}", conversation.name)
    return sanitize_file_name(name)


def filter_messages(messages: list[Message], ignore_empty: bool) -> list[Message]:
    if not ignore_empty:
        return list(messages)
    return [m for m in messages if m.content]


class TableWriter:
    """Writes parsed conversations into an output directory as CSV tables."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.output_dir = Path(settings.output_dir)
        self._used_names: set[str] = set()

    def prepare(self):
        """Delete and recreate the output directory."""
        if self.output_dir.exists():
            logger.info("Removing existing output directory %s", self.output_dir)
            shutil.rmtree(self.output_dir)
        self.output_dir.mkdir(parents=True)
        self._used_names.clear()

    def should_write(self, conversation: Conversation) -> bool:
        if self.settings.ignore_recent and conversation.group == RECENT_GROUP_NAME:
            return False
        return True

    def _unique_name(self, file_name: str) -> str:
        """Suffix _2, _3, ... onto names already written in this run."""
        candidate = file_name
        stem, dot, suffix = file_name.rpartition(".")
        if not dot:
            stem, suffix = file_name, ""
        counter = 2
        while candidate.lower() in self._used_names:
            candidate = f"{stem}_{counter}{dot}{suffix}"
            counter += 1
        self._used_names.add(candidate.lower())
        return candidate

    def write_conversation(self, conversation: Conversation) -> Path:
        """Write one conversation's messages and return the file path."""
        file_name = self._unique_name(
            render_file_name(self.settings.output_file_name, conversation)
        )
        path = self.output_dir / file_name
        messages = filter_messages(conversation.messages, self.settings.ignore_empty)

        logger.info("Writing %s-%s to %s", conversation.group, conversation.name, path)
        with path.open("w", encoding=OUTPUT_ENCODING, newline="") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for msg in messages:
                writer.writerow(
                    (msg.timestamp.strftime(TIMESTAMP_FORMAT), msg.sender, msg.content)
                )
        return path

    def write_all(self, conversations: list[Conversation]) -> list[Path]:
        """Write every conversation that passes should_write, in order."""
        return [
            self.write_conversation(conv)
            for conv in conversations
            if self.should_write(conv)
        ]
