from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class FailureKind(str, Enum):
    # `init` failed only because the project is already initialized
    RECOVERABLE_INIT_STATE = "recoverable_init_state"
    # the process ran and exited non-zero
    COMMAND_FAILURE = "command_failure"
    # the process could not be spawned or did not finish
    UNEXPECTED_EXCEPTION = "unexpected_exception"


@dataclass(slots=True)
class InvocationResult:
    argv: Tuple[str, ...]
    exit_code: Optional[int]
    kind: Optional[FailureKind] = None
    message: str = ""
    detail: Dict[str, Any] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.kind is None

    @property
    def command(self) -> str:
        return shlex.join(self.argv)

    def summary(self) -> str:
        if self.exit_code is None:
            return self.message
        return f"{self.message} (exit code {self.exit_code})"

    def detail_lines(self) -> List[str]:
        lines = [
            f"  command: {self.command}",
            f"  exit code: {self.exit_code}",
            f"  kind: {self.kind.value if self.kind else 'ok'}",
            f"  message: {self.message}",
            f"  duration: {self.duration:.3f}s",
        ]
        for key, value in sorted(self.detail.items()):
            lines.append(f"  {key}: {value!r}")
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "argv": list(self.argv),
            "exit_code": self.exit_code,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "detail": {k: repr(v) for k, v in self.detail.items()},
            "duration": round(self.duration, 3),
        }
