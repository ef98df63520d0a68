from __future__ import annotations

import math

from sandvm.config import MEMORY_MULTIPLIER, MIN_MEMORY_MB
from sandvm.errors import SVMConfigurationError


MIB = 1024 * 1024


def estimate_memory(size_bytes: int, floor_mb: int = MIN_MEMORY_MB, multiplier: float = MEMORY_MULTIPLIER) -> int:
	"""Return guest RAM in bytes for an initrd of ``size_bytes``.

	The kernel refuses to unpack an initrd occupying half of RAM or more, so
	the payload is scaled by ``multiplier`` and ``floor_mb`` is added on top for
	the guest itself. The result is rounded up to whole MiB.
	"""
	if multiplier <= 2:
		raise SVMConfigurationError(f"memory multiplier must exceed 2, got {multiplier}")
	if floor_mb <= 0:
		raise SVMConfigurationError(f"memory floor must be positive, got {floor_mb}")
	payload_mb = math.ceil(max(size_bytes, 0) * multiplier / MIB)
	return (payload_mb + floor_mb) * MIB


def format_memory(memory_bytes: int) -> str:
	# QEMU -m takes a size with a unit suffix
	return f"{math.ceil(memory_bytes / MIB)}M"
