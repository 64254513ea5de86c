from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from .result import InvocationResult


@dataclass(slots=True)
class RunReport:
    init: Optional[InvocationResult] = None
    installs: List[Tuple[str, InvocationResult]] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    started_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def succeeded(self) -> List[str]:
        return [name for name, res in self.installs if res.ok]

    @property
    def failed(self) -> List[str]:
        return [name for name, res in self.installs if not res.ok]

    def summary_lines(self) -> List[str]:
        lines = [f"Done: {len(self.succeeded)} installed, {len(self.failed)} failed"]
        if self.skipped:
            lines[0] += f", {len(self.skipped)} skipped"
        for name in self.failed:
            lines.append(f"  failed: {name}")
        for name in self.skipped:
            lines.append(f"  skipped: {name}")
        return lines

    def save(self, path: Path) -> None:
        data = {
            "started_at": self.started_at,
            "init": self.init.to_dict() if self.init else None,
            "installs": [
                {"package": name, **res.to_dict()} for name, res in self.installs
            ],
            "skipped": list(self.skipped),
        }
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
