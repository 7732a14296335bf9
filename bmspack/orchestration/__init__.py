"""Workflow orchestration package for bmspack.

This package contains orchestration components for reorganization runs:
- PackLogger: Structured plain-text log of a single run.
- PackOrchestrator: Central coordinator for split, merge, move and dedup runs.
"""

from bmspack.orchestration.pack_logger import PackLogger
from bmspack.orchestration.pack_orchestrator import PackOrchestrator

__all__ = ["PackLogger", "PackOrchestrator"]
