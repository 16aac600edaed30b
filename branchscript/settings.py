"""Settings persistence for branchscript."""

from __future__ import annotations

import codecs
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

SETTINGS_PATH = Path("settings.json")
DEFAULT_ENCODING = "utf-8"


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class Settings:
    """Runtime configuration read from ``settings.json``."""

    text_speed: float = 0.0
    strict: bool = False
    encoding: str = DEFAULT_ENCODING

    def clamp(self) -> "Settings":
        self.text_speed = _clamp(float(self.text_speed), 0.0, 3.0)
        self.strict = bool(self.strict)

        try:
            codecs.lookup(str(self.encoding))
        except LookupError:
            self.encoding = DEFAULT_ENCODING
        else:
            self.encoding = str(self.encoding)
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Settings":
        if not isinstance(data, dict):
            return cls()

        def _as_float(key: str, default: float) -> float:
            try:
                return float(data.get(key, default))
            except (TypeError, ValueError):
                return default

        def _as_bool(key: str, default: bool) -> bool:
            value = data.get(key, default)
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in {"true", "1", "yes", "on"}:
                    return True
                if lowered in {"false", "0", "no", "off"}:
                    return False
            return bool(value) if value is not None else default

        settings = cls(
            text_speed=_as_float("text_speed", 0.0),
            strict=_as_bool("strict", False),
            encoding=str(data.get("encoding", DEFAULT_ENCODING)),
        )
        return settings.clamp()


def load_settings(path: Path | str = SETTINGS_PATH) -> Settings:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return Settings()
    except (OSError, json.JSONDecodeError, TypeError) as exc:
        print(f"[Settings] Ignoring unreadable {path}: {exc}", file=sys.stderr)
        return Settings()
    return Settings.from_dict(data)
