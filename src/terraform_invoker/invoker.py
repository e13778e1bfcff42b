"""Provisioning invoker: terraform init -upgrade, then terraform apply.

``invoke`` runs the lifecycle and returns an ``InvocationResult`` for the
caller to act on. ``terraform_apply`` is the exported entry point that treats
any failure as fatal and ends the process.
"""

import sys
import uuid

import structlog

from .config import InvokerSettings
from .errors import ApplyError, HandleConstructionError, InitError, InvokerError
from .handle import HandleFactory, InitOptions, new_terraform
from .logging_config import setup_logging
from .result import InvocationResult, InvocationState, Outcome

logger = structlog.get_logger(__name__)


def invoke(
    work_dir: str,
    exec_path: str,
    handle_factory: HandleFactory | None = None,
) -> InvocationResult:
    """Run construct -> init -> apply once, stopping at the first failure.

    Args:
        work_dir: Directory holding the terraform configuration
        exec_path: Path to the terraform executable
        handle_factory: Builds the tool handle; defaults to new_terraform

    Returns:
        InvocationResult tagged with the outcome and the steps that ran
    """
    factory = handle_factory or new_terraform
    invocation_id = uuid.uuid4().hex
    steps: list[str] = []
    state = InvocationState.IDLE

    def fail(outcome: Outcome, error: InvokerError) -> InvocationResult:
        return InvocationResult(
            invocation_id=invocation_id,
            work_dir=work_dir,
            exec_path=exec_path,
            outcome=outcome,
            state=InvocationState.FAILED,
            failed_from=state,
            steps=steps,
            diagnostic=str(error),
            exit_code=error.result.exit_code if error.result else None,
        )

    with structlog.contextvars.bound_contextvars(invocation_id=invocation_id):
        logger.info("invocation_started", work_dir=work_dir, exec_path=exec_path)

        steps.append("construct")
        try:
            handle = factory(work_dir, exec_path)
        except HandleConstructionError as e:
            logger.error("handle_construction_failed", step=e.step, error=str(e))
            return fail(Outcome.HANDLE_CONSTRUCTION_FAILURE, e)

        state = InvocationState.INITIALIZING
        steps.append("init")
        try:
            handle.init(InitOptions(upgrade=True))
        except InitError as e:
            logger.error("init_failed", step=e.step, error=str(e))
            return fail(Outcome.INIT_FAILURE, e)

        state = InvocationState.APPLYING
        steps.append("apply")
        try:
            handle.apply()
        except ApplyError as e:
            logger.error("apply_failed", step=e.step, error=str(e))
            return fail(Outcome.APPLY_FAILURE, e)

        logger.info("invocation_completed")
        return InvocationResult(
            invocation_id=invocation_id,
            work_dir=work_dir,
            exec_path=exec_path,
            outcome=Outcome.SUCCESS,
            state=InvocationState.DONE,
            steps=steps,
            exit_code=0,
        )


def terraform_apply(work_dir: str, exec_path: str) -> None:
    """Initialize and apply ``work_dir``; any failure ends the process.

    Logging is configured from the environment first so every event lands on
    stderr. The diagnostic naming the failed step is logged and written to
    stderr, then the process exits with status 1.
    """
    setup_logging(InvokerSettings())

    result = invoke(work_dir, exec_path)
    if result.ok:
        return

    logger.critical(
        "terraform_apply_aborted",
        outcome=result.outcome.value,
        failed_from=result.failed_from.value if result.failed_from else None,
        error=result.diagnostic,
    )
    sys.exit(f"error running {result.steps[-1]}: {result.diagnostic}")
