# invoicegen/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    font_regular_path: Path | None
    font_bold_path: Path | None
    log_level: str
    output_dir: Path


def _path_or_none(name: str) -> Path | None:
    p = (os.getenv(name) or "").strip()
    return Path(p) if p else None


def load_settings() -> Settings:
    # Local dev convenience: loads from .env if present.
    load_dotenv()

    return Settings(
        font_regular_path=_path_or_none("INVOICEGEN_FONT_REGULAR"),
        font_bold_path=_path_or_none("INVOICEGEN_FONT_BOLD"),
        log_level=(os.getenv("INVOICEGEN_LOG_LEVEL") or "INFO").upper(),
        output_dir=Path(os.getenv("INVOICEGEN_OUTPUT_DIR") or "out"),
    )


_settings_singleton: Settings | None = None


def get_settings() -> Settings:
    global _settings_singleton
    if _settings_singleton is None:
        _settings_singleton = load_settings()
    return _settings_singleton


def reset_settings() -> None:
    global _settings_singleton
    _settings_singleton = None
