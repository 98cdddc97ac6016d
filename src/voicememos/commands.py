"""External command runner.

Every external tool (ffmpeg, curl, the media player) is invoked through
CommandRunner, which turns any outcome of a process into a CommandResult.
Callers decide what a failure means for them.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""
    args: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands and captures their output."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Default timeout in seconds for each command, or None
                to wait indefinitely.
        """
        self.timeout = timeout

    def run(self, args: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        """Run a command to completion.

        Args:
            args: Program and arguments
            timeout: Timeout in seconds for this command (default: the
                runner's timeout)

        Returns:
            CommandResult. A missing executable yields return code 127 and a
            timeout yields -1, both with an explanation in stderr.
        """
        args = [str(arg) for arg in args]
        timeout = timeout if timeout is not None else self.timeout
        logger.debug(f"Running: {' '.join(args)}")

        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            return CommandResult(args, 127, "", f"Command not found: {args[0]}")
        except subprocess.TimeoutExpired:
            return CommandResult(args, -1, "", f"{args[0]} timed out after {timeout} seconds")

        if completed.returncode != 0:
            logger.debug(f"{args[0]} exited with status {completed.returncode}")

        return CommandResult(args, completed.returncode, completed.stdout or "", completed.stderr or "")
