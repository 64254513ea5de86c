"""Tests for the bootstrap Sequencer."""

import pytest

from pkgstrap.core.errors import SequencerStateError
from pkgstrap.core.plan import InstallPlan
from pkgstrap.core.result import FailureKind
from pkgstrap.core.sequencer import Phase, Sequencer, SequencerConfig


def make(**kwargs) -> Sequencer:
    kwargs.setdefault("cli", "elm")
    kwargs.setdefault("debug", False)
    return Sequencer(SequencerConfig(**kwargs))


class TestRun:
    def test_init_then_installs_in_order(self, fake_run):
        report = make().run(InstallPlan(["elm/svg", "elm/json"]))

        assert fake_run.commands == ["init", "install elm/svg", "install elm/json"]
        assert report.succeeded == ["elm/svg", "elm/json"]
        assert report.failed == []

    def test_every_invocation_gets_the_answer(self, fake_run):
        make(answer="y\n").run(InstallPlan(["elm/svg"]))

        assert [c["input"] for c in fake_run.calls] == ["y\n", "y\n"]

    def test_empty_plan_only_inits(self, fake_run):
        seq = make()
        report = seq.run(InstallPlan())

        assert fake_run.commands == ["init"]
        assert report.installs == []
        assert seq.phase is Phase.DONE

    def test_duplicates_are_installed_twice(self, fake_run):
        make().run(InstallPlan(["elm/json", "elm/json"]))

        assert fake_run.commands == ["init", "install elm/json", "install elm/json"]

    def test_already_initialized_is_silent_and_continues(self, fake_run, capsys):
        fake_run.codes["init"] = 1
        seq = make(already_initialized_code=1)

        report = seq.run(InstallPlan(["elm/svg", "elm/json"]))

        assert fake_run.commands == ["init", "install elm/svg", "install elm/json"]
        assert report.init.kind is FailureKind.RECOVERABLE_INIT_STATE
        assert capsys.readouterr().err == ""

    def test_other_init_failure_is_reported_and_continues(self, fake_run, capsys):
        fake_run.codes["init"] = 3
        seq = make(already_initialized_code=1)

        report = seq.run(InstallPlan(["elm/svg", "elm/json"]))

        assert fake_run.commands == ["init", "install elm/svg", "install elm/json"]
        assert report.init.kind is FailureKind.COMMAND_FAILURE
        err = capsys.readouterr().err
        assert "Failed: init: command failed (exit code 3)" in err
        assert seq.phase is Phase.DONE

    def test_stop_on_init_failure_skips_installs(self, fake_run, capsys):
        fake_run.codes["init"] = 3
        seq = make(continue_on_init_failure=False)

        report = seq.run(InstallPlan(["elm/svg", "elm/json"]))

        assert fake_run.commands == ["init"]
        assert report.skipped == ["elm/svg", "elm/json"]
        assert seq.phase is Phase.DONE
        assert "Skipping: elm/svg (init failed)" in capsys.readouterr().out

    def test_stop_on_init_failure_still_accepts_existing_project(self, fake_run):
        fake_run.codes["init"] = 1
        report = make(continue_on_init_failure=False).run(InstallPlan(["elm/svg"]))

        assert fake_run.commands == ["init", "install elm/svg"]
        assert report.skipped == []

    def test_failed_install_does_not_stop_the_next(self, fake_run):
        fake_run.codes["install elm/svg"] = 1

        report = make().run(InstallPlan(["elm/svg", "elm/json", "elm/time"]))

        assert fake_run.commands == [
            "init",
            "install elm/svg",
            "install elm/json",
            "install elm/time",
        ]
        assert report.failed == ["elm/svg"]
        assert report.succeeded == ["elm/json", "elm/time"]

    def test_never_raises_when_everything_fails(self, fake_run):
        fake_run.raises["init"] = FileNotFoundError(2, "No such file or directory")
        for name in ("elm/svg", "elm/json"):
            fake_run.raises[f"install {name}"] = PermissionError(13, "Permission denied")

        report = make().run(InstallPlan(["elm/svg", "elm/json"]))

        assert report.init.kind is FailureKind.UNEXPECTED_EXCEPTION
        assert report.failed == ["elm/svg", "elm/json"]

    def test_progress_lines(self, fake_run, capsys):
        make().run(InstallPlan(["elm/svg", "elm/json"]))

        out = capsys.readouterr().out
        assert out.splitlines() == ["Installing: elm/svg", "Installing: elm/json"]


class TestReporting:
    def test_short_failure_without_debug(self, fake_run, capsys):
        fake_run.codes["install elm/svg"] = 1

        make(debug=False).run(InstallPlan(["elm/svg"]))

        err = capsys.readouterr().err.splitlines()
        assert err == [
            "Failed: install elm/svg: command failed (exit code 1)"
        ]

    def test_full_detail_with_debug(self, fake_run, capsys):
        fake_run.codes["install elm/svg"] = 1

        make(debug=True).run(InstallPlan(["elm/svg"]))

        err = capsys.readouterr().err
        assert "  command: elm install elm/svg" in err
        assert "  exit code: 1" in err
        assert "  kind: command_failure" in err
        assert "  cwd: " in err
        assert fake_run.calls[1]["stdout"] is None


class TestPhases:
    def test_initialize_moves_to_initialized(self, fake_run):
        seq = make()
        assert seq.phase is Phase.NOT_STARTED

        seq.initialize()

        assert seq.phase is Phase.INITIALIZED

    def test_initialize_failure_moves_to_init_failed(self, fake_run):
        fake_run.codes["init"] = 7
        seq = make()

        seq.initialize()

        assert seq.phase is Phase.INIT_FAILED_NONFATAL

    def test_initialize_twice_raises(self, fake_run):
        seq = make()
        seq.initialize()

        with pytest.raises(SequencerStateError):
            seq.initialize()
        assert fake_run.commands == ["init"]

    def test_install_before_initialize_raises(self, fake_run):
        with pytest.raises(SequencerStateError):
            make().install_package("elm/svg")
        assert fake_run.calls == []

    def test_install_package_after_initialize(self, fake_run):
        seq = make()
        seq.initialize()

        res = seq.install_package("elm/svg")

        assert res.ok
        assert seq.phase is Phase.INSTALLING
        assert seq.report.installs == [("elm/svg", res)]

    def test_index_tracks_current_install(self, fake_run, monkeypatch):
        seq = make()
        seen = []
        execute = seq.executor.execute

        def spy(act):
            seen.append((seq.phase, seq.index))
            return execute(act)

        monkeypatch.setattr(seq.executor, "execute", spy)
        seq.run(InstallPlan(["elm/svg", "elm/json"]))

        assert seen == [
            (Phase.INITIALIZING, None),
            (Phase.INSTALLING, 0),
            (Phase.INSTALLING, 1),
        ]
        assert seq.index is None

    def test_run_twice_raises(self, fake_run):
        seq = make()
        seq.run(InstallPlan(["elm/svg"]))

        with pytest.raises(SequencerStateError):
            seq.run(InstallPlan(["elm/svg"]))


def test_tasks_lists_init_first(fake_run):
    tasks = make().tasks(InstallPlan(["elm/svg", "elm/json"]))

    assert [t.describe() for t in tasks] == [
        "init",
        "install elm/svg",
        "install elm/json",
    ]
    assert fake_run.calls == []


def test_run_and_install_package_share_one_install_path(fake_run, monkeypatch):
    seq = make()
    installed = []
    install = seq._install

    def spy(act):
        installed.append(act.package)
        return install(act)

    monkeypatch.setattr(seq, "_install", spy)
    report = seq.run(InstallPlan(["elm/svg", "elm/json"]))

    assert installed == ["elm/svg", "elm/json"]
    assert [name for name, _ in report.installs] == ["elm/svg", "elm/json"]
