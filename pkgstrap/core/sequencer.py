"""
Bootstrap sequencer: one `<cli> init`, then `<cli> install <name>` for every
entry of an install plan, in order.

The run is fail-soft. A project that is already initialized is not an error,
any other failure is reported and the remaining installs still run. `run()`
always reaches `Phase.DONE`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import ALREADY_INITIALIZED_EXIT_CODE, ANSWER, CLI, DEBUG
from .action import Action, CliInit, CliInstall
from .errors import SequencerStateError
from .executor import REPORTED, Executor
from .plan import InstallPlan
from .report import RunReport
from .result import InvocationResult


class Phase(str, Enum):
    NOT_STARTED = "not_started"
    INITIALIZING = "initializing"
    INIT_FAILED_NONFATAL = "init_failed_nonfatal"
    INITIALIZED = "initialized"
    INSTALLING = "installing"
    DONE = "done"


@dataclass(slots=True)
class SequencerConfig:
    cli: str | Sequence[str] = CLI
    answer: str = ANSWER
    already_initialized_code: int = ALREADY_INITIALIZED_EXIT_CODE
    debug: bool = DEBUG
    continue_on_init_failure: bool = True
    timeout: Optional[float] = None
    cwd: Optional[Path] = None


class Sequencer:
    def __init__(self, config: Optional[SequencerConfig] = None) -> None:
        self.config = config or SequencerConfig()
        self.executor = Executor(debug=self.config.debug)
        self.phase = Phase.NOT_STARTED
        # plan index of the install currently running
        self.index: Optional[int] = None
        self.report = RunReport()

    def _options(self) -> dict:
        c = self.config
        return {"answer": c.answer, "cwd": c.cwd, "debug": c.debug, "timeout": c.timeout}

    def init_action(self) -> CliInit:
        return CliInit(
            self.config.cli,
            already_initialized_code=self.config.already_initialized_code,
            **self._options(),
        )

    def install_action(self, name: str) -> CliInstall:
        return CliInstall(self.config.cli, name, **self._options())

    def tasks(self, plan: InstallPlan) -> List[Action]:
        """The full ordered task list `run(plan)` executes."""
        return [self.init_action(), *(self.install_action(n) for n in plan)]

    def initialize(self) -> InvocationResult:
        if self.phase is not Phase.NOT_STARTED:
            raise SequencerStateError(
                f"initialize() must run once, before any install (phase: {self.phase.value})"
            )
        self.phase = Phase.INITIALIZING
        res = self.executor.execute(self.init_action())
        self.report.init = res
        if res.kind in REPORTED:
            self.phase = Phase.INIT_FAILED_NONFATAL
        else:
            self.phase = Phase.INITIALIZED
        return res

    def _check_can_install(self) -> None:
        if self.phase in (Phase.NOT_STARTED, Phase.INITIALIZING, Phase.DONE):
            raise SequencerStateError(
                f"install_package() needs a finished initialize() (phase: {self.phase.value})"
            )

    def _install(self, act: CliInstall) -> InvocationResult:
        self.phase = Phase.INSTALLING
        res = self.executor.execute(act)
        self.report.installs.append((act.package, res))
        return res

    def install_package(self, name: str) -> InvocationResult:
        self._check_can_install()
        return self._install(self.install_action(name))

    def run(self, plan: InstallPlan) -> RunReport:
        self.initialize()

        if self.phase is Phase.INIT_FAILED_NONFATAL and not self.config.continue_on_init_failure:
            for name in plan:
                print(f"Skipping: {name} (init failed)")
                self.report.skipped.append(name)
            self.phase = Phase.DONE
            return self.report

        def step(i: int, act: CliInstall) -> InvocationResult:
            self.index = i
            return self._install(act)

        self.executor.run((self.install_action(n) for n in plan), step=step)
        self.index = None
        self.phase = Phase.DONE
        return self.report
