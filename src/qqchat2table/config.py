"""Central configuration for constants and run settings."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Settings file read from the working directory
CONFIG_FILE_NAME = "config.txt"

# Export file layout
PREAMBLE_LINES = 2  # Header lines at the top of the export with no records
SEPARATOR = "=" * 64
GROUP_LABEL = "消息分组:"
GROUP_LABEL_OFFSET = 5
SUBJECT_LABEL = "消息对象:"
SUBJECT_LABEL_OFFSET = 5
RECENT_GROUP_NAME = "最近联系人"

# Table output
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
CSV_HEADER = ("时间", "发送者", "内容")
FILE_NAME_REPLACEMENT = "-"
OUTPUT_ENCODING = "utf-8-sig"  # BOM so spreadsheet apps detect UTF-8


class Settings(BaseModel):
    """Run settings, keyed in the config file by their aliases."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    input: Path = Field(Path("全部消息记录.txt"), alias="Input")
    output_dir: Path = Field(Path("output"), alias="OutputDir")
    output_file_name: str = Field("{Group}-{Name}.csv", alias="OutputFileName")
    ignore_empty: bool = Field(False, alias="IgnoreEmpty")
    ignore_recent: bool = Field(True, alias="IgnoreRecent")
    multi_lines: bool = Field(True, alias="MultiLines")

    @field_validator("ignore_empty", "ignore_recent", "multi_lines", mode="before")
    @classmethod
    def _parse_flag(cls, value):
        if isinstance(value, str):
            text = value.strip().lower()
            if text == "true":
                return True
            if text == "false":
                return False
            raise ValueError(f"expected True or False, got {value!r}")
        return value

    def with_overrides(self, **values) -> Settings:
        """Return a copy with every non-None value applied."""
        update = {key: value for key, value in values.items() if value is not None}
        if not update:
            return self
        return self.model_validate({**self.model_dump(), **update})

    def to_lines(self) -> list[str]:
        """Render the settings in config file syntax."""
        lines = []
        for key, value in self.model_dump(by_alias=True).items():
            if isinstance(value, bool):
                value = "True" if value else "False"
            lines.append(f"{key}={value}")
        return lines


def load_settings(path: Path | str = CONFIG_FILE_NAME) -> Settings:
    """Read key=value settings from path, falling back to defaults.

    Blank lines and lines without exactly one '=' are skipped. Unknown keys
    are ignored.
    """
    config_file = Path(path)
    if not config_file.is_file():
        logger.debug("No config file at %s, using defaults", config_file)
        return Settings()

    known_keys = {field.alias for field in Settings.model_fields.values()}
    values: dict[str, str] = {}
    with config_file.open("r", encoding="utf-8-sig") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            parts = line.split("=")
            if len(parts) != 2:
                logger.debug("Ignoring config line %r", line)
                continue
            key, value = parts
            if key not in known_keys:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            values[key] = value

    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration in {config_file}:\n{exc}") from exc
