from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from sandvm.errors import SVMConfigurationError
from sandvm.types import KernelImage


logger = logging.getLogger(__name__)

KernelLocator = Callable[[], Path]

BOOT_DIR = Path("/boot")


def running_kernel(boot_dir: Path = BOOT_DIR) -> Path:
	"""Path of the image the host is currently booted from."""
	release = os.uname().release
	return boot_dir / f"vmlinuz-{release}"


def resolve_kernel(path: Optional[str | Path] = None, locator: KernelLocator = running_kernel) -> KernelImage:
	if path is not None:
		candidate = Path(path)
	else:
		candidate = locator()
		logger.debug("Discovered kernel image %s", candidate)
	if not candidate.is_file():
		raise SVMConfigurationError(f"Kernel image {candidate} does not exist")
	if not os.access(candidate, os.R_OK):
		raise SVMConfigurationError(f"Kernel image {candidate} is not readable")
	return KernelImage(path=candidate)
