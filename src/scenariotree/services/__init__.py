"""Service Layer: Compilation orchestration."""

from __future__ import annotations

from .compile_service import CompileOutcome, CompileResult, CompileService

__all__ = [
    "CompileOutcome",
    "CompileResult",
    "CompileService",
]
