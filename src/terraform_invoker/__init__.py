from .errors import ApplyError, HandleConstructionError, InitError, InvokerError
from .handle import CommandResult, InitOptions, TerraformHandle, ToolHandle, new_terraform
from .invoker import invoke, terraform_apply
from .result import InvocationResult, InvocationState, Outcome

__all__ = [
    "ApplyError",
    "CommandResult",
    "HandleConstructionError",
    "InitError",
    "InitOptions",
    "InvocationResult",
    "InvocationState",
    "InvokerError",
    "Outcome",
    "TerraformHandle",
    "ToolHandle",
    "invoke",
    "new_terraform",
    "terraform_apply",
]
