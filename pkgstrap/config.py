from __future__ import annotations

import os
from pathlib import Path

# Package CLI invoked for `init` and `install <name>`
CLI = os.environ.get("PKGSTRAP_CLI", "elm")

# Answer fed on stdin to every invocation so no prompt blocks the run
ANSWER = os.environ.get("PKGSTRAP_ANSWER", "Y").rstrip("\n") + "\n"

# Exit code `<cli> init` uses when the project manifest already exists
ALREADY_INITIALIZED_EXIT_CODE = int(
    os.environ.get("PKGSTRAP_ALREADY_INITIALIZED_CODE", "1")
)

# Runtime behavior
DEBUG = bool(int(os.environ.get("PKGSTRAP_DEBUG", "0")))

# Plan file named explicitly through the environment; None means look for
# PLAN_FILE_NAME in the project directory
_plan_env = os.environ.get("PKGSTRAP_PLAN")
PLAN_FILE = Path(_plan_env).resolve() if _plan_env else None
PLAN_FILE_NAME = "plan.py"

# Installed in this order after `init`
DEFAULT_PLAN = (
    "elm/svg",
    "elm/json",
    "elm/time",
    "elm/random",
)

# Command execution defaults
SHELL_ENV = os.environ.copy()
