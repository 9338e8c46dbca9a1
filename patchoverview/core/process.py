"""
External process seam used by the patch locator and the status checker.

Everything that shells out goes through ProcessRunner.run(), so tests can
swap in a runner that returns scripted exit codes.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from .errors import ToolNotFoundError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Exit code reported when the shell would have failed before starting the
# program (unreadable input redirect, missing working directory).
REDIRECT_FAILURE = 1


class ProcessRunner:
    """Runs a program and reports its exit code."""

    def exists(self, program: str) -> bool:
        """Return True if `program` can be run."""
        raise NotImplementedError

    def run(self, args: Sequence[str], cwd: Optional[PathLike] = None, stdin: Optional[PathLike] = None) -> int:
        """Run `args` in `cwd`, feeding `stdin` from a file, and return the exit code."""
        raise NotImplementedError


class SubprocessRunner(ProcessRunner):
    """ProcessRunner backed by subprocess, with output discarded."""

    def __init__(self):
        self._found: Dict[str, bool] = {}

    def exists(self, program: str) -> bool:
        if program not in self._found:
            self._found[program] = shutil.which(program) is not None
            logger.debug(f"Program {program} available: {self._found[program]}")
        return self._found[program]

    def run(self, args: Sequence[str], cwd: Optional[PathLike] = None, stdin: Optional[PathLike] = None) -> int:
        args = [str(arg) for arg in args]
        if not self.exists(args[0]):
            raise ToolNotFoundError(args[0])

        if cwd is not None and not os.path.isdir(cwd):
            logger.debug(f"Working directory {cwd} does not exist, skipping {' '.join(args)}")
            return REDIRECT_FAILURE

        try:
            stdin_handle = open(stdin, "rb") if stdin is not None else subprocess.DEVNULL
        except OSError as e:
            logger.debug(f"Cannot read {stdin}: {e}")
            return REDIRECT_FAILURE

        try:
            # New session: no controlling terminal, so interactive prompts take their default.
            completed = subprocess.run(
                args,
                cwd=cwd,
                stdin=stdin_handle,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        finally:
            if stdin is not None:
                stdin_handle.close()

        logger.debug(f"{' '.join(args)} (cwd={cwd}) exited with {completed.returncode}")
        return completed.returncode
