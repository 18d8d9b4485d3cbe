# python
"""
fsreplay/runlog.py
RunLog dataclass and JSONL event logging for a single replay run.
"""
from dataclasses import dataclass, field
import datetime
import json
import pathlib
import uuid
from typing import Any, Optional


def iso_ts(moment: Optional[datetime.datetime] = None) -> str:
    """
    Format `moment` (default: now) as a UTC ISO timestamp with a Z suffix,
    truncated to whole seconds.
    """
    moment = moment or datetime.datetime.now(datetime.timezone.utc)
    moment = moment.astimezone(datetime.timezone.utc).replace(microsecond=0)
    return moment.isoformat().replace("+00:00", "Z")


def parse_ts(ts: str) -> datetime.datetime:
    """Inverse of iso_ts."""
    return datetime.datetime.fromisoformat(ts.replace("Z", "+00:00"))


@dataclass
class RunLog:
    events_file: str
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_ts: str = field(default_factory=iso_ts)
    version: str = "0.1"

    def __post_init__(self):
        pathlib.Path(self.events_file).parent.mkdir(parents=True, exist_ok=True)

    def log(self, event: str, phase: str, **fields: Any) -> None:
        rec = {
            "ts": iso_ts(),
            "run_id": self.run_id,
            "event": event,
            "phase": phase,
            "version": self.version,
            "payload": fields or {},
        }
        with open(self.events_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def duration_ms(self) -> int:
        elapsed = datetime.datetime.now(datetime.timezone.utc) - parse_ts(self.started_ts)
        return int(elapsed.total_seconds() * 1000)
