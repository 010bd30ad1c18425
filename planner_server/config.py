# -*- coding: utf-8 -*-
"""Runtime settings, read from environment variables."""
from __future__ import annotations

import logging
import typing as t
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_DIR = Path.home() / ".weekly_planner"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    export_dir: Path
    log_level: str = "INFO"
    service_port: int = 8004


def load_settings() -> Settings:
    """Builds settings from ``PLANNER_*`` environment variables."""
    data_dir = Path(os.getenv("PLANNER_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser()
    export_dir = Path(os.getenv("PLANNER_EXPORT_DIR", str(data_dir / "exports"))).expanduser()
    return Settings(
        data_dir=data_dir,
        export_dir=export_dir,
        log_level=os.getenv("PLANNER_LOG_LEVEL", "INFO").upper(),
        service_port=int(os.getenv("PLANNER_SERVICE_PORT", "8004")),
    )


def configure_logging(level: str, handler: t.Optional[logging.Handler] = None) -> None:
    """Installs a root handler at ``level`` (a plain stream handler by default)."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(message)s" if handler is not None else "%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler] if handler is not None else None,
    )
