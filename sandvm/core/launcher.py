from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sandvm.config import Config
from sandvm.core.memory import estimate_memory, format_memory
from sandvm.errors import SVMConfigurationError, SVMLaunchError, SVMTimeout
from sandvm.hypervisor import Executor, ProcessSpec, SubprocessExecutor, build_qemu_spec
from sandvm.types import BootPayload, KernelImage
from sandvm.utils.fs import remove_if_exists


logger = logging.getLogger(__name__)


@dataclass
class SandboxRun:
	memory_bytes: int
	payload: BootPayload
	kernel: KernelImage
	spec: ProcessSpec
	output_sink: Path
	status_sink: Path
	returncode: Optional[int] = None
	duration_s: Optional[float] = None


class Launcher:
	def __init__(self, cfg: Optional[Config] = None, executor: Optional[Executor] = None):
		self.cfg = cfg or Config()
		self.executor = executor or SubprocessExecutor()

	def prepare(self, payload: BootPayload, kernel: KernelImage, output_sink: Path, status_sink: Path) -> SandboxRun:
		"""Validate inputs and build the process spec without touching the sinks."""
		if not payload.path.is_file():
			raise SVMConfigurationError(f"Boot payload {payload.path} does not exist")
		if not kernel.path.is_file():
			raise SVMConfigurationError(f"Kernel image {kernel.path} does not exist")
		if Path(output_sink).resolve() == Path(status_sink).resolve():
			raise SVMConfigurationError("Output and status sinks must be distinct files")
		memory = estimate_memory(payload.size_bytes, floor_mb=self.cfg.min_memory_mb, multiplier=self.cfg.memory_multiplier)
		spec = build_qemu_spec(
			self.cfg.qemu_binary,
			memory,
			kernel,
			payload,
			Path(output_sink),
			Path(status_sink),
			init=self.cfg.init,
			loglevel=self.cfg.loglevel,
			kvm=self.cfg.kvm,
			extra_args=self.cfg.extra_args,
		)
		return SandboxRun(memory_bytes=memory, payload=payload, kernel=kernel, spec=spec, output_sink=Path(output_sink), status_sink=Path(status_sink))

	def launch(self, payload: BootPayload, kernel: KernelImage, output_sink: Path, status_sink: Path) -> SandboxRun:
		run = self.prepare(payload, kernel, output_sink, status_sink)
		if self.executor.which(run.spec.binary) is None:
			raise SVMLaunchError(f"Hypervisor binary {run.spec.binary!r} not found on PATH")

		for sink in run.spec.sinks():
			if remove_if_exists(sink):
				logger.debug("Removed stale sink %s", sink)

		logger.info(
			"Booting %s (%d bytes) with %s of RAM, kernel %s",
			payload.path, payload.size_bytes, format_memory(run.memory_bytes), kernel.path,
		)
		try:
			result = self.executor.run(run.spec, timeout=self.cfg.timeout)
		except subprocess.TimeoutExpired as e:
			raise SVMTimeout(f"Hypervisor did not exit within {self.cfg.timeout}s") from e
		except OSError as e:
			raise SVMLaunchError(f"Failed to start {run.spec.binary}: {e}") from e

		run.returncode = result.returncode
		run.duration_s = result.duration_s
		logger.info("Hypervisor exited with %d after %.1fs", result.returncode, result.duration_s)
		return run
