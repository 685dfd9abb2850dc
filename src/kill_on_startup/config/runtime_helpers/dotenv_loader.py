"""Dotenv file loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError

_EXPORT_PREFIX = "export "
_QUOTES = ("'", '"')


class DotenvLoader:
    """Reads KEY=value pairs from .env files written for shells or launchd wrappers."""

    @staticmethod
    def load_from_file(path: Path) -> Dict[str, str]:
        """
        Load key-value pairs from a .env file.

        Lines may start with ``export``. Unquoted values drop a trailing
        `` # comment``; quoted values keep their contents verbatim.

        Returns:
            Dictionary of values, empty when the file is absent

        Raises:
            ConfigurationError: If the file cannot be read or a key is malformed
        """
        if not path.exists():
            return {}

        try:
            text = path.read_text()
        except OSError as exc:
            raise ConfigurationError.load_failed("dotenv configuration", str(path)) from exc

        values: Dict[str, str] = {}
        for line_number, line in enumerate(text.splitlines(), start=1):
            entry = DotenvLoader.parse_line(line)
            if entry is None:
                continue
            key, value = entry
            if not key or any(ch.isspace() for ch in key):
                raise ConfigurationError.invalid_format(f"{path}:{line_number}", line.strip(), "KEY=value")
            values[key] = value
        return values

    @staticmethod
    def parse_line(line: str) -> Optional[Tuple[str, str]]:
        """Split one line into (key, value); None for blanks and comments."""
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            return None
        if stripped.startswith(_EXPORT_PREFIX):
            stripped = stripped[len(_EXPORT_PREFIX) :].lstrip()

        key, raw_value = stripped.split("=", 1)
        return key.strip(), DotenvLoader._clean_value(raw_value.strip())

    @staticmethod
    def _clean_value(raw_value: str) -> str:
        if len(raw_value) >= 2 and raw_value[0] in _QUOTES and raw_value[-1] == raw_value[0]:
            return raw_value[1:-1]
        comment_at = raw_value.find(" #")
        if comment_at != -1:
            raw_value = raw_value[:comment_at]
        return raw_value.rstrip()
