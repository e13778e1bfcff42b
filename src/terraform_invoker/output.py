"""Route terraform output lines into the structured log."""

import re

import structlog

logger = structlog.get_logger(__name__)

_ERROR_LINE = re.compile(r"^error\W", re.IGNORECASE)


def is_error_line(line: str) -> bool:
    return bool(_ERROR_LINE.match(line))


def log_tool_output(output: str | None, command: str) -> int:
    """Log every non-empty line of tool output.

    Lines beginning with ``Error`` are logged at error level, everything else
    at info. Terraform emits CRLF line endings on some platforms, so both
    separators are handled.

    Returns:
        Number of lines logged
    """
    if not output:
        return 0

    count = 0
    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue
        if is_error_line(line):
            logger.error("terraform_output", command=command, line=line)
        else:
            logger.info("terraform_output", command=command, line=line)
        count += 1
    return count
