"""Tool handles bound to a terraform working directory and executable.

A handle exposes the two lifecycle operations the invoker needs, ``init`` and
``apply``. ``TerraformHandle`` shells out to the real binary; tests substitute
a fake that satisfies the same ``ToolHandle`` protocol.
"""

import os
import subprocess
import time
from dataclasses import dataclass
from typing import Protocol

import structlog

from .errors import ApplyError, HandleConstructionError, InitError, InvokerError
from .output import log_tool_output

logger = structlog.get_logger(__name__)

# Arguments terraform-exec passes by default
INIT_ARGS = [
    "init",
    "-no-color",
    "-force-copy",
    "-input=false",
    "-backend=true",
    "-get=true",
]
APPLY_ARGS = [
    "apply",
    "-no-color",
    "-auto-approve",
    "-input=false",
    "-lock=true",
    "-parallelism=10",
    "-refresh=true",
]

# Truncation for stderr attached to log events
_LOG_TAIL = 2000


@dataclass(frozen=True)
class InitOptions:
    """Options for the init step. Upgrade is always on."""

    upgrade: bool = True


@dataclass
class CommandResult:
    """Outcome of a single terraform run."""

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ToolHandle(Protocol):
    """Lifecycle operations against one (work_dir, exec_path) pair."""

    work_dir: str
    exec_path: str

    def init(self, options: InitOptions) -> CommandResult:
        """Prepare the working directory. Raises InitError on failure."""
        ...

    def apply(self) -> CommandResult:
        """Provision the configuration. Raises ApplyError on failure."""
        ...


class HandleFactory(Protocol):
    def __call__(self, work_dir: str, exec_path: str) -> ToolHandle: ...


@dataclass
class TerraformHandle:
    """Handle that runs the terraform binary as a subprocess."""

    work_dir: str
    exec_path: str

    def init(self, options: InitOptions) -> CommandResult:
        args = [*INIT_ARGS, f"-upgrade={str(options.upgrade).lower()}"]
        return self._run(args, InitError)

    def apply(self) -> CommandResult:
        return self._run(list(APPLY_ARGS), ApplyError)

    def _run(self, args: list[str], error_cls: type[InvokerError]) -> CommandResult:
        command = args[0]
        cmd = [self.exec_path, *args]
        env = {**os.environ, "TF_IN_AUTOMATION": "1"}

        logger.info("terraform_command_start", command=command, work_dir=self.work_dir)

        start = time.time()
        try:
            process = subprocess.run(
                cmd,
                cwd=self.work_dir,
                env=env,
                capture_output=True,
                # Provider output is not guaranteed to be valid UTF-8
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            logger.error(
                "terraform_command_not_started",
                command=command,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise error_cls(f"failed to run {self.exec_path} {command}: {e}") from e

        duration_ms = (time.time() - start) * 1000
        result = CommandResult(
            args=args,
            exit_code=process.returncode,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
        )

        log_tool_output(result.stdout, command)
        log_tool_output(result.stderr, command)

        if not result.ok:
            logger.error(
                "terraform_command_failed",
                command=command,
                exit_code=result.exit_code,
                duration_ms=round(duration_ms, 2),
                stderr=result.stderr[-_LOG_TAIL:] or None,
            )
            detail = result.stderr.strip() or result.stdout.strip()
            raise error_cls(
                f"terraform {command} exited with code {result.exit_code}: {detail}",
                result=result,
            )

        logger.info(
            "terraform_command_success",
            command=command,
            duration_ms=round(duration_ms, 2),
        )
        return result


def new_terraform(work_dir: str, exec_path: str) -> TerraformHandle:
    """Bind a TerraformHandle after checking both paths.

    Raises:
        HandleConstructionError: work_dir is empty or not a directory, or
            exec_path is empty or not an executable file.
    """
    if not work_dir:
        raise HandleConstructionError("no working directory specified")
    if not os.path.exists(work_dir):
        raise HandleConstructionError(f"working directory {work_dir} does not exist")
    if not os.path.isdir(work_dir):
        raise HandleConstructionError(f"working directory {work_dir} is not a directory")

    if not exec_path:
        raise HandleConstructionError("no executable path specified")
    if not os.path.isfile(exec_path) or not os.access(exec_path, os.X_OK):
        raise HandleConstructionError(f"{exec_path} is not an executable file")

    return TerraformHandle(work_dir=work_dir, exec_path=exec_path)
