"""Executor that runs the hypervisor as a plain child process."""

from __future__ import annotations

import shutil
import subprocess
import time
from typing import Optional

from .base import Executor, ProcessResult, ProcessSpec


class SubprocessExecutor(Executor):
    """Runs the hypervisor in the foreground of the calling process.

    stdin and stdout are inherited so the stdio serial channel is the
    caller's terminal. The child is killed if ``timeout`` expires.
    """

    def which(self, binary: str) -> Optional[str]:
        return shutil.which(binary)

    def run(self, spec: ProcessSpec, timeout: Optional[int] = None) -> ProcessResult:
        start = time.monotonic()
        proc = subprocess.run(spec.argv, timeout=timeout, check=False)
        return ProcessResult(returncode=proc.returncode, duration_s=time.monotonic() - start)
