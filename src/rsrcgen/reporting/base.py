from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from ..errors import RsrcError

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "format_diagnostic",
    "task",
]


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()
    SKIPPED = auto()


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    name: str
    total: Optional[int] = None
    completed: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def stats(self) -> str:
        parts = [
            f"{key}={self.meta[key]}"
            for key in ("resources", "bytes", "files")
            if key in self.meta
        ]
        return f" [{' '.join(parts)}]" if parts else ""


_VERBOSITY: int = 0  # global verbosity level set by CLI (-v repeats)


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


def format_diagnostic(err: "RsrcError", source: str | None = None) -> List[str]:
    """Render an error as ``path:line:col: CODE: message`` plus a caret line.

    The source excerpt is only included when the script text is available.
    """
    pos = err.position
    head = f"{err.code}: {err.message}"
    if pos is None:
        return [head]
    lines = [f"{pos}: {head}"]
    if source is not None:
        src_lines = source.splitlines()
        if 0 < pos.line <= len(src_lines):
            text = src_lines[pos.line - 1].expandtabs(1)
            lines.append(f"    {text}")
            lines.append("    " + " " * (pos.column - 1) + "^")
    return lines


class Reporter:
    """Output sink for one rsrcgen run.

    Backends implement the task lifecycle (``start_task``, ``advance``,
    ``end_task``) and the message levels. ``verbose`` output is gated by the
    global verbosity; ``diagnostic`` renders a compilation error together
    with its source line.
    """

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        raise NotImplementedError

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        raise NotImplementedError

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        raise NotImplementedError

    def status(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        pass

    def error(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def diagnostic(self, err: "RsrcError", source: str | None = None) -> None:
        self.error("\n".join(format_diagnostic(err, source)), code=err.code)

    def section(self, title: str) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter(stream=sys.stderr)
    return _ACTIVE_REPORTER


@contextmanager
def task(task_id: str, name: str, total: int | None = None, **meta: Any):
    rep = get_reporter()
    rep.start_task(task_id, name, total, **meta)
    try:
        yield
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED)
        raise
    else:
        rep.end_task(task_id, TaskStatus.SUCCESS)
