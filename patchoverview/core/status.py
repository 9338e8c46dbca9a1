"""
Status checker - dry-runs `patch` to see whether a patch is in place.

The strip level a patch was written for is not recorded anywhere, so both
-p1 (whole-repo patches) and -p0 (package-relative patches) are tried.
A clean reverse at either level means the patch is applied; only then are
forward probes tried.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .models import PatchStatus
from .process import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

PATCH_PROGRAM = "patch"
STRIP_LEVELS = ("-p1", "-p0")

# (reverse, status on success), reverse probes first
PROBES: Tuple[Tuple[bool, PatchStatus], ...] = (
    (True, PatchStatus.APPLIED),
    (False, PatchStatus.NOT_APPLIED),
)


def probe_args(strip_level: str, reverse: bool) -> List[str]:
    args = [PATCH_PROGRAM, strip_level]
    if reverse:
        args.append("-R")
    args.append("--dry-run")
    return args


class StatusChecker:
    """Decides Applied / Not applied / Unsure for a patch file in a package directory."""

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner or SubprocessRunner()

    def check(self, install_path: Path, patch_file: Path) -> PatchStatus:
        for reverse, status in PROBES:
            for strip_level in STRIP_LEVELS:
                args = probe_args(strip_level, reverse)
                exit_code = self.runner.run(args, cwd=install_path, stdin=patch_file)
                logger.debug(f"{' '.join(args)} < {patch_file} in {install_path}: exit {exit_code}")
                if exit_code == 0:
                    return status

        return PatchStatus.UNSURE
