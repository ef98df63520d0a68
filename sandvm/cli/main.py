from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler

from sandvm.config import Config
from sandvm.core.decoder import decode_result
from sandvm.core.memory import estimate_memory, format_memory
from sandvm.core.runner import prepare_payload, run_payload, sink_paths
from sandvm.errors import SVMConfigurationError, SVMLaunchError, SVMTimeout


LAUNCH_FAILURE_EXIT_CODE = 125
TIMEOUT_EXIT_CODE = 124

app = typer.Typer(name="svm", help="Run a program inside a throwaway QEMU VM")
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(message)s",
		handlers=[RichHandler(console=err_console, show_path=False)],
		force=True,
	)


def _build_config(qemu: Optional[str], init: Optional[str], loglevel: Optional[int], kvm: Optional[bool], timeout: Optional[int]) -> Config:
	overrides = {
		"qemu_binary": qemu,
		"init": init,
		"loglevel": loglevel,
		"kvm": kvm,
		"timeout": timeout,
	}
	return Config(**{k: v for k, v in overrides.items() if v is not None})


def _fail(message: str, code: int) -> None:
	err_console.print(f"[red]error:[/red] {message}")
	raise typer.Exit(code=code)


@app.command("run")
def run_cmd(
	payload: Path = typer.Argument(..., help="Initramfs image to boot"),
	output: Optional[Path] = typer.Option(None, "--output", "-o", help="Where to write guest output on success"),
	kernel: Optional[Path] = typer.Option(None, help="Kernel image; defaults to the running kernel"),
	qemu: Optional[str] = typer.Option(None, help="Hypervisor binary"),
	init: Optional[str] = typer.Option(None, help="Init program inside the initramfs"),
	loglevel: Optional[int] = typer.Option(None, help="Guest console loglevel"),
	kvm: Optional[bool] = typer.Option(None, "--kvm/--no-kvm", help="Use KVM acceleration"),
	timeout: Optional[int] = typer.Option(None, help="Kill the VM after this many seconds"),
	verbose: bool = typer.Option(False, "--verbose", "-v"),
):
	_setup_logging(verbose)
	cfg = _build_config(qemu, init, loglevel, kvm, timeout)
	try:
		outcome = run_payload(payload, destination=output, kernel=kernel, cfg=cfg)
	except (SVMConfigurationError, SVMLaunchError) as e:
		_fail(str(e), LAUNCH_FAILURE_EXIT_CODE)
	except SVMTimeout as e:
		_fail(str(e), TIMEOUT_EXIT_CODE)
	if outcome.kind == "protocol_error":
		err_console.print(f"[red]guest did not report an exit status[/red] (exit {outcome.exit_code})")
	elif outcome.kind == "failure":
		err_console.print(f"[yellow]guest exited with status {outcome.exit_code}[/yellow]")
	raise typer.Exit(code=outcome.exit_code)


@app.command("estimate")
def estimate_cmd(size_bytes: int = typer.Argument(..., min=0)):
	cfg = Config()
	try:
		memory = estimate_memory(size_bytes, floor_mb=cfg.min_memory_mb, multiplier=cfg.memory_multiplier)
	except SVMConfigurationError as e:
		_fail(str(e), LAUNCH_FAILURE_EXIT_CODE)
	print({"payload_bytes": size_bytes, "memory_bytes": memory, "qemu_memory": format_memory(memory)})


@app.command("cmdline")
def cmdline_cmd(
	payload: Path = typer.Argument(...),
	output: Optional[Path] = typer.Option(None, "--output", "-o"),
	kernel: Optional[Path] = typer.Option(None),
	qemu: Optional[str] = typer.Option(None),
	init: Optional[str] = typer.Option(None),
	loglevel: Optional[int] = typer.Option(None),
	kvm: Optional[bool] = typer.Option(None, "--kvm/--no-kvm"),
):
	cfg = _build_config(qemu, init, loglevel, kvm, None)
	try:
		run = prepare_payload(payload, destination=output, kernel=kernel, cfg=cfg)
	except SVMConfigurationError as e:
		_fail(str(e), LAUNCH_FAILURE_EXIT_CODE)
	typer.echo(shlex.join(run.spec.argv))


@app.command("decode")
def decode_cmd(destination: Path = typer.Argument(..., help="Destination whose .out/.rc sinks to decode")):
	out_sink, rc_sink = sink_paths(destination)
	outcome = decode_result(out_sink, rc_sink, destination)
	print({"outcome": outcome.kind, "exit_code": outcome.exit_code})
	raise typer.Exit(code=outcome.exit_code)


if __name__ == "__main__":
	app()
