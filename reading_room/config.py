from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .presence import DEFAULT_SWEEP_INTERVAL

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 15470


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class ServerSettings:
    epub_path: Optional[Path] = None
    password: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    sweep_interval: float = DEFAULT_SWEEP_INTERVAL
    enable_search: bool = True

    @classmethod
    def from_env(cls) -> "ServerSettings":
        epub = os.getenv("READING_ROOM_EPUB")
        return cls(
            epub_path=Path(epub) if epub else None,
            password=os.getenv("READING_ROOM_PASSWORD") or None,
            host=os.getenv("READING_ROOM_HOST", DEFAULT_HOST),
            port=int(os.getenv("READING_ROOM_PORT", str(DEFAULT_PORT))),
            sweep_interval=float(os.getenv("READING_ROOM_SWEEP_INTERVAL", str(DEFAULT_SWEEP_INTERVAL))),
            enable_search=_env_flag("READING_ROOM_SEARCH", "1"),
        )
