"""Archiving engine and orchestration."""

from .archive_engine import ArchiveEngine, EngineState
from .output_router import DestinationRegistry, OutputRouter
from .run_orchestrator import RunOrchestrator

__all__ = [
    "ArchiveEngine",
    "DestinationRegistry",
    "EngineState",
    "OutputRouter",
    "RunOrchestrator",
]
