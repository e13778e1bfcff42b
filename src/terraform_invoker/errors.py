from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .handle import CommandResult


class InvokerError(Exception):
    """Base error for a failed invocation step."""

    step: str = "unknown"

    def __init__(self, message: str, result: CommandResult | None = None):
        super().__init__(message)
        self.result = result


class HandleConstructionError(InvokerError):
    """Raised when a tool handle cannot be bound to its directory/executable."""

    step = "construct"


class InitError(InvokerError):
    """Raised when `terraform init` fails."""

    step = "init"


class ApplyError(InvokerError):
    """Raised when `terraform apply` fails."""

    step = "apply"
