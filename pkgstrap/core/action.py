from __future__ import annotations

import os
import shlex
import subprocess
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import ALREADY_INITIALIZED_EXIT_CODE, ANSWER, SHELL_ENV
from .result import FailureKind, InvocationResult


def split_cli(cli: str | Sequence[str]) -> List[str]:
    if isinstance(cli, str):
        return shlex.split(cli)
    return list(cli)


class Action(ABC):
    @abstractmethod
    def run(self) -> InvocationResult: ...

    def announce(self) -> Optional[str]:
        """Progress line printed before the action runs, if any."""
        return None

    def describe(self) -> str:
        return self.__class__.__name__


# -------- Command actions --------
class RunCommand(Action):
    """Run one command to completion, feeding `answer` on stdin.

    Child output is inherited when `debug` is set and discarded otherwise.
    Spawn errors and timeouts are returned as results, never raised.
    """

    def __init__(
        self,
        cmd: str | Sequence[str],
        answer: str = ANSWER,
        cwd: Optional[str | Path] = None,
        debug: bool = False,
        timeout: Optional[float] = None,
    ) -> None:
        self.cmd: Sequence[str] = split_cli(cmd)
        self.answer = answer
        self.cwd = cwd
        self.debug = debug
        self.timeout = timeout

    def classify(self, exit_code: int) -> Optional[FailureKind]:
        if exit_code == 0:
            return None
        return FailureKind.COMMAND_FAILURE

    def _detail(self) -> dict:
        return {
            "cwd": str(self.cwd) if self.cwd is not None else os.getcwd(),
            "timeout": self.timeout,
        }

    def run(self) -> InvocationResult:
        argv = tuple(self.cmd)
        command = shlex.join(argv)
        stream = None if self.debug else subprocess.DEVNULL
        started = time.monotonic()
        try:
            cp = subprocess.run(
                argv,
                input=self.answer,
                text=True,
                stdout=stream,
                stderr=stream,
                cwd=self.cwd,
                env=SHELL_ENV,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            return InvocationResult(
                argv=argv,
                exit_code=None,
                kind=FailureKind.UNEXPECTED_EXCEPTION,
                message=f"timed out after {self.timeout}s",
                detail={**self._detail(), "exception": e},
                duration=time.monotonic() - started,
            )
        except OSError as e:
            return InvocationResult(
                argv=argv,
                exit_code=None,
                kind=FailureKind.UNEXPECTED_EXCEPTION,
                message=f"could not start {argv[0] if argv else command}: {e.strerror or e}",
                detail={**self._detail(), "exception": e, "errno": e.errno},
                duration=time.monotonic() - started,
            )

        kind = self.classify(cp.returncode)
        if kind is None:
            message = ""
        elif kind is FailureKind.RECOVERABLE_INIT_STATE:
            message = "project already initialized"
        else:
            message = "command failed"
        return InvocationResult(
            argv=argv,
            exit_code=cp.returncode,
            kind=kind,
            message=message,
            detail=self._detail() if kind else {},
            duration=time.monotonic() - started,
        )

    def describe(self) -> str:
        return f"run command: {shlex.join(self.cmd)}"


# -------- Package CLI actions --------
class CliInit(RunCommand):
    def __init__(
        self,
        cli: str | Sequence[str],
        already_initialized_code: int = ALREADY_INITIALIZED_EXIT_CODE,
        **kwargs,
    ) -> None:
        super().__init__([*split_cli(cli), "init"], **kwargs)
        self.already_initialized_code = already_initialized_code

    def classify(self, exit_code: int) -> Optional[FailureKind]:
        if exit_code != 0 and exit_code == self.already_initialized_code:
            return FailureKind.RECOVERABLE_INIT_STATE
        return super().classify(exit_code)

    def describe(self) -> str:
        return "init"


class CliInstall(RunCommand):
    def __init__(self, cli: str | Sequence[str], package: str, **kwargs) -> None:
        super().__init__([*split_cli(cli), "install", package], **kwargs)
        self.package = package

    def announce(self) -> Optional[str]:
        return f"Installing: {self.package}"

    def describe(self) -> str:
        return f"install {self.package}"
