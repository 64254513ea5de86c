"""
pkgstrap package initializer.

Re-exports the pieces a plan.py or a calling script needs:
from pkgstrap import InstallPlan, Sequencer, SequencerConfig
"""

from __future__ import annotations

from .core.plan import InstallPlan
from .core.sequencer import Phase, Sequencer, SequencerConfig

__all__ = ["InstallPlan", "Phase", "Sequencer", "SequencerConfig"]
