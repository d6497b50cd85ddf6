from __future__ import annotations
import json, os, threading, time
from dataclasses import dataclass, asdict
from typing import Optional

@dataclass
class BoardEvent:
    event: str
    page_id: str
    ts: float
    latency_ms: int = 0
    status: int = 200
    comment_count: Optional[int] = None
    detail: str = ""

class MetricsLogger:
    """Append-only JSONL event log. An empty path disables logging."""
    def __init__(self, path: Optional[str] = "results/events.jsonl") -> None:
        self.path = path or None
        self._lock = threading.Lock()
        if self.path:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def log(self, m: BoardEvent) -> None:
        if not self.path:
            return
        line = json.dumps(asdict(m)) + "\n"
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)

    def event(self, event: str, page_id: str, **fields) -> None:
        self.log(BoardEvent(event=event, page_id=page_id, ts=time.time(), **fields))

class Timer:
    def __enter__(self):
        self.start = time.time()
        return self
    def __exit__(self, exc_type, exc, tb):
        self.end = time.time()
    @property
    def ms(self) -> int:
        return int((self.end - self.start) * 1000)
