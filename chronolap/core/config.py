"""Runtime configuration for the CLI and web front ends."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from chronolap.core.engine import STORAGE_KEY
from chronolap.store.kv_store import default_store_path


@dataclass
class AppConfig:
    state_path: Path = field(default_factory=default_store_path)
    storage_key: str = STORAGE_KEY
    tick_interval_sec: float = 0.05  # expiry detection latency is at most one tick
    lang: str = "es"
    web_host: str = "127.0.0.1"
    web_port: int = 8089

    def __post_init__(self) -> None:
        self.state_path = Path(self.state_path).expanduser()
        self.tick_interval_sec = max(0.01, float(self.tick_interval_sec))
