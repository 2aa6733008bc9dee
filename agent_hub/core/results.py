from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from agent_hub.core.exceptions import AgentHubError


@dataclass
class OperationResult:
    """Result of a lifecycle or briefing operation exposed to callers."""

    success: bool
    data: Any = None
    message: str = ""
    error: str | None = None  # exception class name from the taxonomy

    @classmethod
    def ok(cls, data: Any = None, message: str = "") -> OperationResult:
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, exc: Exception | str, error: str | None = None) -> OperationResult:
        if isinstance(exc, AgentHubError):
            return cls(success=False, message=str(exc), error=type(exc).__name__)
        if isinstance(exc, Exception):
            return cls(success=False, message=str(exc) or type(exc).__name__, error=error or "AgentHubError")
        return cls(success=False, message=exc, error=error)
