from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_QEMU_BINARY = "qemu-system-x86_64"
DEFAULT_INIT = "/rdinit"
DEFAULT_LOGLEVEL = 4
MIN_MEMORY_MB = 64
MEMORY_MULTIPLIER = 2.5
PROTOCOL_ERROR_EXIT_CODE = 99


def _get_int(key: str, default: int) -> int:
	try:
		return int(os.getenv(key, ""))
	except ValueError:
		return default


def _get_float(key: str, default: float) -> float:
	try:
		return float(os.getenv(key, ""))
	except ValueError:
		return default


def _get_bool(key: str) -> bool:
	return bool(os.getenv(key))


def _get_timeout(key: str) -> Optional[int]:
	value = os.getenv(key)
	if not value:
		return None
	try:
		seconds = int(value)
	except ValueError:
		return None
	return seconds if seconds > 0 else None


def _get_optional_path(key: str) -> Optional[Path]:
	value = os.getenv(key)
	return Path(value) if value else None


class Config(BaseModel):
	qemu_binary: str = Field(default_factory=lambda: os.getenv("SVM_QEMU") or DEFAULT_QEMU_BINARY)
	init: str = Field(default_factory=lambda: os.getenv("SVM_INIT") or DEFAULT_INIT, description="In-guest init program passed as rdinit=")
	loglevel: int = Field(default_factory=lambda: _get_int("SVM_LOGLEVEL", DEFAULT_LOGLEVEL), description="Guest kernel console loglevel")
	min_memory_mb: int = Field(default_factory=lambda: _get_int("SVM_MIN_MEMORY_MB", MIN_MEMORY_MB))
	memory_multiplier: float = Field(default_factory=lambda: _get_float("SVM_MEMORY_MULTIPLIER", MEMORY_MULTIPLIER))
	kvm: bool = Field(default_factory=lambda: _get_bool("SVM_KVM"))
	timeout: Optional[int] = Field(default_factory=lambda: _get_timeout("SVM_TIMEOUT"), description="Seconds before the hypervisor is killed; None blocks until exit")
	kernel: Optional[Path] = Field(default_factory=lambda: _get_optional_path("SVM_KERNEL"))
	extra_args: List[str] = Field(default_factory=lambda: shlex.split(os.getenv("SVM_EXTRA_ARGS", "")))

	@field_validator("timeout")
	@classmethod
	def _non_positive_timeout_is_unset(cls, value: Optional[int]) -> Optional[int]:
		# subprocess would kill the hypervisor immediately
		if value is not None and value <= 0:
			return None
		return value
