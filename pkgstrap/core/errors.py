from __future__ import annotations


class PkgstrapError(Exception):
    pass


class PlanNotFoundError(PkgstrapError):
    def __init__(self, path: str):
        super().__init__(f"Plan file not found: {path}")
        self.path = path


class InvalidPlanError(PkgstrapError):
    pass


class SequencerStateError(PkgstrapError):
    pass


class PlanUndefinedError(InvalidPlanError):
    def __init__(self, path: str):
        super().__init__(f"{path} must define `plan: InstallPlan`")
        self.path = path
