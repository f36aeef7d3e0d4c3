"""
Synchronous provider execution.

Runs one provider to completion and hands back its stdout. No timeout is
applied: a hung provider blocks the slot it occupies.
"""
import logging
import subprocess
from typing import Optional, Sequence

from .models import InvocationResult

logger = logging.getLogger(__name__)


class ProviderInvoker:
    def __init__(self, working_dir: Optional[str] = None):
        self.working_dir = working_dir

    def invoke(self, provider_path: str, args: Sequence[str]) -> InvocationResult:
        argv = [provider_path, *args]
        logger.debug("Invoking %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=self.working_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
            )
        except (OSError, ValueError) as e:
            logger.debug("Failed to run %s: %s", provider_path, e)
            return InvocationResult(success=False, exit_code=None)

        if proc.returncode != 0:
            logger.debug("%s exited with status %d: %s",
                         provider_path, proc.returncode, proc.stderr.strip())
            return InvocationResult(success=False, exit_code=proc.returncode)

        return InvocationResult(success=True, exit_code=0, output=proc.stdout)
