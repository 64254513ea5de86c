from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

PackageName = str


@dataclass(slots=True, frozen=True)
class InstallPlan:
    """Ordered package names installed one after another after `init`.

    Later entries may rely on earlier ones already being registered in the
    project manifest, so order is kept exactly as given. Duplicates are kept.
    """

    packages: Sequence[PackageName] = ()

    def __post_init__(self) -> None:
        if isinstance(self.packages, str):
            raise ValueError("InstallPlan.packages must be a sequence of names, not str")
        names = tuple(self.packages)
        for name in names:
            if not name or not isinstance(name, str):
                raise ValueError(f"Package name must be non-empty str: {name!r}")
            if any(ch.isspace() for ch in name):
                raise ValueError(f"Package name must not contain whitespace: {name!r}")
        object.__setattr__(self, "packages", names)

    def __iter__(self) -> Iterator[PackageName]:
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)
