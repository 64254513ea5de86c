from __future__ import annotations

import runpy
from pathlib import Path

from ..core.errors import InvalidPlanError, PlanNotFoundError, PlanUndefinedError
from ..core.plan import InstallPlan


def _read_lines(path: Path) -> list[str]:
    names = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.split("#", 1)[0].strip()
        if line:
            names.append(line)
    return names


def load_plan(path: Path) -> InstallPlan:
    """
    Load an InstallPlan from a file.

    `*.py` files are executed and must define `plan` (an InstallPlan or a
    list of names). Any other file holds one package name per line; blank
    lines and `#` comments are ignored.
    """
    path = Path(path)
    if not path.is_file():
        raise PlanNotFoundError(str(path))

    if path.suffix == ".py":
        globs = runpy.run_path(str(path))
        obj = globs.get("plan")
        if isinstance(obj, InstallPlan):
            return obj
        if obj is None:
            raise PlanUndefinedError(str(path))
        if not isinstance(obj, (list, tuple)):
            raise InvalidPlanError(f"{path}: `plan` must be an InstallPlan or a list of names")
    else:
        obj = _read_lines(path)

    try:
        return InstallPlan(obj)
    except ValueError as e:
        raise InvalidPlanError(f"{path}: {e}") from e
