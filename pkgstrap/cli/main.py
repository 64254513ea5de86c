from __future__ import annotations

import argparse
import shlex
import sys
from pathlib import Path
from typing import List

from .. import config
from ..core.errors import InvalidPlanError, PkgstrapError, PlanUndefinedError
from ..core.plan import InstallPlan
from ..core.sequencer import Sequencer, SequencerConfig
from ..repo.loader import load_plan


def resolve_plan(args: argparse.Namespace) -> InstallPlan:
    """
    Pick the plan to run, first match wins:
    names on the command line, --plan, $PKGSTRAP_PLAN, plan.py in the
    project directory (--cwd, else the current one), the built-in list.
    """
    if args.packages:
        try:
            return InstallPlan(args.packages)
        except ValueError as e:
            raise InvalidPlanError(str(e)) from e
    if args.plan is not None:
        return load_plan(args.plan)
    if config.PLAN_FILE is not None:
        return load_plan(config.PLAN_FILE)

    found = (args.cwd or Path.cwd()) / config.PLAN_FILE_NAME
    if found.is_file():
        try:
            return load_plan(found)
        except PlanUndefinedError as e:
            print(f"{e}; using the built-in plan", file=sys.stderr)
    return InstallPlan(config.DEFAULT_PLAN)


def build_config(args: argparse.Namespace) -> SequencerConfig:
    return SequencerConfig(
        cli=args.cli,
        answer=args.answer.rstrip("\n") + "\n",
        already_initialized_code=args.already_initialized_code,
        debug=args.debug,
        continue_on_init_failure=not args.stop_on_init_failure,
        timeout=args.timeout,
        cwd=args.cwd,
    )


def cmd_show(args: argparse.Namespace) -> int:
    plan = resolve_plan(args)
    if not plan:
        print("Nothing to install.")
        return 0
    for i, name in enumerate(plan, 1):
        print(f"{i}. {name}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    plan = resolve_plan(args)
    seq = Sequencer(build_config(args))

    if args.dry_run:
        for a in seq.tasks(plan):
            print(f"  DRY-RUN: {a.__class__.__name__} -> {shlex.join(a.cmd)}")
        return 0

    report = seq.run(plan)
    for line in report.summary_lines():
        print(line)
    if args.report is not None:
        try:
            report.save(args.report)
        except OSError as e:
            print(f"Could not write report: {e}", file=sys.stderr)
        else:
            print(f"Report written to {args.report}")
    # Individual failures never change the exit status
    return 0


def _add_plan_args(sp: argparse.ArgumentParser) -> None:
    sp.add_argument(
        "packages", nargs="*", help="Package names (default: plan file or built-in list)"
    )
    sp.add_argument("--plan", type=Path, default=None, help="Plan file (plan.py or one name per line)")
    sp.add_argument("--cwd", type=Path, default=None, help="Project directory")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pkgstrap",
        description="Initialize a project and install its packages with a package CLI",
    )
    sub = p.add_subparsers(dest="command")

    sp_run = sub.add_parser("run", help="Run init, then install every package in order")
    _add_plan_args(sp_run)
    sp_run.add_argument("--cli", default=config.CLI, help="Package CLI to invoke (default: %(default)s)")
    sp_run.add_argument(
        "--answer",
        default=config.ANSWER,
        help="Confirmation answer fed to every invocation (default: %(default)r)",
    )
    sp_run.add_argument(
        "--already-initialized-code",
        type=int,
        default=config.ALREADY_INITIALIZED_EXIT_CODE,
        help="Exit code of `init` meaning the project already exists (default: %(default)s)",
    )
    sp_run.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=config.DEBUG,
        help="Show child output and full failure detail",
    )
    sp_run.add_argument(
        "--stop-on-init-failure",
        action="store_true",
        help="Skip the installs when init fails for any reason other than an existing project",
    )
    sp_run.add_argument(
        "--timeout", type=float, default=None, help="Seconds allowed per invocation"
    )
    sp_run.add_argument("--report", type=Path, default=None, help="Write a JSON run report")
    sp_run.add_argument(
        "--dry-run", action="store_true", help="Print the commands without executing"
    )
    sp_run.set_defaults(func=cmd_run)

    sp_show = sub.add_parser("show", help="Print the install plan")
    _add_plan_args(sp_show)
    sp_show.set_defaults(func=cmd_show)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 2
    try:
        return int(args.func(args) or 0)
    except PkgstrapError as e:
        print(str(e), file=sys.stderr)
        return 2
