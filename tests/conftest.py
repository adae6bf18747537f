"""Pytest configuration and shared fixtures."""
from pathlib import Path

import pytest

from qqchat2table.config import SEPARATOR


@pytest.fixture
def sample_export_lines():
    """Return the lines of a small export with three blocks."""
    return [
        "消息记录（此消息记录为文本格式，不支持重新导入）",
        "",
        SEPARATOR,
        "消息分组:我的好友",
        SEPARATOR,
        "消息对象:Alice",
        SEPARATOR,
        "",
        "2023-01-05 9:30:00 Alice",
        "hello",
        "world",
        "",
        "2023-01-05 21:04:11 Bob",
        "hi Alice",
        "",
        SEPARATOR,
        "消息分组:最近联系人",
        SEPARATOR,
        "消息对象:Carol",
        SEPARATOR,
        "",
        "2023-02-01 08:00:00 Carol",
        "ping",
        "",
        SEPARATOR,
        "消息分组:我的群聊",
        SEPARATOR,
        "消息对象:Study Group",
        SEPARATOR,
        "",
    ]


@pytest.fixture
def sample_export_file(tmp_path, sample_export_lines):
    """Write the sample export to a temporary UTF-8 file with a BOM."""
    export_file = tmp_path / "全部消息记录.txt"
    export_file.write_text("\r\n".join(sample_export_lines) + "\r\n", encoding="utf-8-sig")
    return export_file


@pytest.fixture
def write_config(tmp_path):
    """Return a helper that writes a config.txt with the given lines."""
    def _write(*lines: str) -> Path:
        config_file = tmp_path / "config.txt"
        config_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return config_file
    return _write
