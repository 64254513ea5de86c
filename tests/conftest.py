import subprocess
from typing import Dict, List

import pytest


class FakeRun:
    """Records subprocess.run calls and answers with configured exit codes."""

    def __init__(self) -> None:
        self.calls: List[dict] = []
        self.codes: Dict[str, int] = {}
        self.raises: Dict[str, BaseException] = {}
        self.active = 0

    def command(self, index: int) -> str:
        return " ".join(self.calls[index]["argv"][1:])

    @property
    def commands(self) -> List[str]:
        return [self.command(i) for i in range(len(self.calls))]

    def __call__(self, argv, **kwargs):
        assert self.active == 0, "subprocess started while another one was running"
        self.active += 1
        try:
            self.calls.append({"argv": list(argv), **kwargs})
            key = " ".join(argv[1:])
            if key in self.raises:
                raise self.raises[key]
            return subprocess.CompletedProcess(argv, self.codes.get(key, 0))
        finally:
            self.active -= 1


@pytest.fixture
def fake_run(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr("pkgstrap.core.action.subprocess.run", fake)
    return fake
