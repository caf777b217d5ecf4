"""Local export artifact location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_EXPORT_FILENAME: Final[str] = "dnsseckeydata.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    export_path: Path

    def resolve_export_path(self) -> Path:
        return self.export_path.expanduser().resolve()

    def ensure_export_dir(self) -> Path:
        path = self.resolve_export_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path


def get_storage_config(*, export_path: Path | str | None = None) -> StorageConfig:
    if export_path is not None:
        return StorageConfig(export_path=Path(export_path))
    env_path = os.getenv("DNSSEC_EXPORT_FILE")
    path = Path(env_path) if env_path and env_path.strip() else Path(DEFAULT_EXPORT_FILENAME)
    return StorageConfig(export_path=path)
