from __future__ import annotations

import sys
import time
from typing import Any, Dict, TextIO

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

ICONS = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
    TaskStatus.SKIPPED: "→",
}

# label -> ANSI color
_LEVELS = {
    "INFO": "32",
    "WARN": "33",
    "ERROR": "31",
    "VERB": "36",
}


class PlainReporter(Reporter):
    """Line oriented reporter for terminals and logs; colors only on a tty."""

    def __init__(self, stream: TextIO | None = None, use_color: bool | None = None):
        self.stream = stream or sys.stderr
        if use_color is None:
            isatty = getattr(self.stream, "isatty", None)
            use_color = bool(isatty and isatty())
        self.use_color = use_color
        self._tasks: Dict[str, TaskRecord] = {}

    def _line(self, label: str, message: str, color: str | None = None) -> None:
        if self.use_color:
            label = f"\x1b[{color or _LEVELS[label]}m{label}\x1b[0m"
        self.stream.write(f"{label}: {message}\n")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        if get_verbosity() >= 1:
            item = meta.get("current_item", f"#{rec.completed}")
            of = "?" if rec.total is None else rec.total
            self.stream.write(
                f"   · {rec.name}: {item} ({rec.completed}/{of})\n"
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
        counts = "" if rec.total is None else f" {rec.completed}/{rec.total}"
        self.stream.write(
            f" {ICONS.get(status, '?')} {rec.name}{counts} "
            f"({rec.end_time - rec.start_time:.2f}s){rec.stats()}\n"
        )

    def status(self, message: str, **fields: Any) -> None:
        self._line("INFO", message)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._line(f"VERB{level}", message, _LEVELS["VERB"])

    def error(self, message: str, **fields: Any) -> None:
        self._line("ERROR", message)

    def warning(self, message: str, **fields: Any) -> None:
        self._line("WARN", message)

    def section(self, title: str) -> None:
        self.stream.write(f"\n[{title}]\n")
