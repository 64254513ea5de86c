from __future__ import annotations

import sys
from typing import Callable, Iterable, List, Optional

from .action import Action
from .result import FailureKind, InvocationResult

# Failures that are printed; a recoverable init state is absorbed silently
REPORTED = (FailureKind.COMMAND_FAILURE, FailureKind.UNEXPECTED_EXCEPTION)


def report_failure(act: Action, res: InvocationResult, debug: bool = False) -> None:
    print(f"Failed: {act.describe()}: {res.summary()}", file=sys.stderr)
    if debug:
        for line in res.detail_lines():
            print(line, file=sys.stderr)


def run_action(act: Action) -> InvocationResult:
    try:
        return act.run()
    except Exception as e:
        return InvocationResult(
            argv=tuple(getattr(act, "cmd", ())),
            exit_code=None,
            kind=FailureKind.UNEXPECTED_EXCEPTION,
            message=f"raised {e.__class__.__name__}: {e}",
            detail={"exception": e},
        )


class Executor:
    """
    Execute actions strictly one after another.
    - Each action completes before the next one starts.
    - A failed action is reported once and never stops the ones after it.
    """

    def __init__(self, debug: bool = False) -> None:
        self.debug = debug

    def execute(self, act: Action) -> InvocationResult:
        line = act.announce()
        if line:
            print(line, flush=True)
        res = run_action(act)
        if res.kind in REPORTED:
            report_failure(act, res, debug=self.debug)
        return res

    def run(
        self,
        actions: Iterable[Action],
        step: Optional[Callable[[int, Action], InvocationResult]] = None,
    ) -> List[InvocationResult]:
        """Run `step(i, act)` for each action in order; defaults to `execute`."""
        results: List[InvocationResult] = []
        for i, act in enumerate(actions):
            if step is None:
                results.append(self.execute(act))
            else:
                results.append(step(i, act))
        return results
