"""QEMU command line construction."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from sandvm.core.memory import format_memory
from sandvm.types import BootPayload, KernelImage

from .base import ProcessSpec, SerialBinding


def kernel_cmdline(init: str, loglevel: int) -> str:
    # panic=1 plus -no-reboot turns a guest panic into a halt
    return f"rdinit={init} panic=1 console=ttyS0 loglevel={loglevel}"


def serial_channels(output_sink: Path, status_sink: Path) -> List[SerialBinding]:
    """ttyS0 is the interactive console, ttyS1 program output, ttyS2 exit status."""
    return [
        SerialBinding(index=0, backend="stdio"),
        SerialBinding(index=1, backend="file", path=output_sink),
        SerialBinding(index=2, backend="file", path=status_sink),
    ]


def _chardev_args(channel: SerialBinding) -> List[str]:
    if channel.backend == "stdio":
        return ["-chardev", f"stdio,mux=on,id={channel.chardev_id}"]
    # QemuOpts separates on "," and reads ",," as a literal comma
    path = str(channel.path).replace(",", ",,")
    return ["-chardev", f"file,id={channel.chardev_id},path={path}"]


def build_qemu_spec(
    binary: str,
    memory_bytes: int,
    kernel: KernelImage,
    payload: BootPayload,
    output_sink: Path,
    status_sink: Path,
    init: str = "/rdinit",
    loglevel: int = 4,
    kvm: bool = False,
    extra_args: Optional[Sequence[str]] = None,
) -> ProcessSpec:
    """Build the hypervisor invocation for one sandboxed run."""
    channels = serial_channels(output_sink, status_sink)
    args = [
        "-m", format_memory(memory_bytes),
        "-kernel", str(kernel.path),
        "-initrd", str(payload.path),
        "-append", kernel_cmdline(init, loglevel),
        "-no-reboot",
        "-display", "none",
    ]
    if kvm:
        args.append("-enable-kvm")
    for channel in channels:
        args.extend(_chardev_args(channel))
    # The monitor shares the stdio chardev; ctrl-a c toggles between them
    args.extend(["-mon", f"chardev={channels[0].chardev_id}"])
    for channel in channels:
        args.extend(["-serial", f"chardev:{channel.chardev_id}"])
    if extra_args:
        args.extend(extra_args)
    return ProcessSpec(binary=binary, args=args, channels=channels)
