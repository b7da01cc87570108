from __future__ import annotations

import json
import re
import sys
import time
from typing import Any, Dict, TextIO

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

# "<Kind> summary: k=v k=v" status lines become structured summary events
_SUMMARY_RE = re.compile(
    r"^(types|compile|write|manifest|inspect) summary:(.*)$", re.IGNORECASE
)


class JsonLinesReporter(Reporter):
    """One JSON object per line; meant for tooling that drives rsrcgen."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout
        self._tasks: Dict[str, TaskRecord] = {}

    def _emit(self, event: str, **payload: Any) -> None:
        payload["event"] = event
        self.stream.write(json.dumps(payload, sort_keys=True) + "\n")

    def _message(self, level: str, message: str, **fields: Any) -> None:
        self._emit("status", message=message, level=level, **fields)

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=dict(meta))
        self._emit("task_start", id=task_id, name=name, total=total, **meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        self._emit(
            "task_progress", id=task_id, completed=rec.completed, **meta
        )

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        self._emit(
            "task_end",
            id=task_id,
            status=status.name.lower(),
            completed=rec.completed,
            total=rec.total,
            duration_seconds=rec.end_time - rec.start_time,
            **rec.meta,
        )

    def status(self, message: str, **fields: Any) -> None:
        m = _SUMMARY_RE.match(message)
        if m:
            pairs = dict(
                tok.split("=", 1) for tok in m.group(2).split() if "=" in tok
            )
            self._emit(
                "summary",
                summary_type=m.group(1).lower(),
                raw=message,
                **pairs,
                **fields,
            )
        self._message("info", message, **fields)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._message(f"verbose{level}", message, vlevel=level, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._message("error", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._message("warning", message, **fields)

    def diagnostic(self, err, source: str | None = None) -> None:
        self._emit("diagnostic", level="error", **err.to_dict())

    def section(self, title: str) -> None:
        self._emit("section", title=title)
