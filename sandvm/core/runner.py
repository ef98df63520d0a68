from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from sandvm.config import Config
from sandvm.core.decoder import decode_result
from sandvm.core.kernel import KernelLocator, resolve_kernel, running_kernel
from sandvm.core.launcher import Launcher, SandboxRun
from sandvm.hypervisor import Executor
from sandvm.types import BootPayload, KernelImage, RunOutcome


def sink_paths(destination: Path) -> Tuple[Path, Path]:
	destination = Path(destination)
	return destination.with_name(destination.name + ".out"), destination.with_name(destination.name + ".rc")


def default_destination(payload: Path) -> Path:
	payload = Path(payload)
	return payload.with_name(payload.stem + ".result")


def _resolve_inputs(payload: str | Path, destination: Optional[str | Path], kernel: Optional[str | Path], cfg: Config, locator: KernelLocator) -> Tuple[BootPayload, KernelImage, Path]:
	boot = BootPayload.from_path(payload)
	image = resolve_kernel(kernel or cfg.kernel, locator)
	dest = Path(destination) if destination else default_destination(boot.path)
	return boot, image, dest


def prepare_payload(
	payload: str | Path,
	destination: Optional[str | Path] = None,
	kernel: Optional[str | Path] = None,
	cfg: Optional[Config] = None,
	executor: Optional[Executor] = None,
	locator: KernelLocator = running_kernel,
) -> SandboxRun:
	"""Resolve inputs and build the hypervisor invocation without running it."""
	cfg = cfg or Config()
	boot, image, dest = _resolve_inputs(payload, destination, kernel, cfg, locator)
	out_sink, rc_sink = sink_paths(dest)
	return Launcher(cfg, executor).prepare(boot, image, out_sink, rc_sink)


def run_payload(
	payload: str | Path,
	destination: Optional[str | Path] = None,
	kernel: Optional[str | Path] = None,
	cfg: Optional[Config] = None,
	executor: Optional[Executor] = None,
	locator: KernelLocator = running_kernel,
) -> RunOutcome:
	"""Boot ``payload`` in a throwaway VM and decode what the guest reported.

	Guest output lands in ``destination`` only when the guest reports status 0.
	Raises SVMConfigurationError or SVMLaunchError before any decode happens.
	"""
	cfg = cfg or Config()
	boot, image, dest = _resolve_inputs(payload, destination, kernel, cfg, locator)
	out_sink, rc_sink = sink_paths(dest)
	Launcher(cfg, executor).launch(boot, image, out_sink, rc_sink)
	return decode_result(out_sink, rc_sink, dest)
