"""Hypervisor process abstractions."""

from sandvm.hypervisor.base import (
    Executor,
    ProcessResult,
    ProcessSpec,
    SerialBinding,
)
from sandvm.hypervisor.qemu import build_qemu_spec, kernel_cmdline, serial_channels
from sandvm.hypervisor.subprocess_executor import SubprocessExecutor

__all__ = [
    "Executor",
    "ProcessResult",
    "ProcessSpec",
    "SerialBinding",
    "SubprocessExecutor",
    "build_qemu_spec",
    "kernel_cmdline",
    "serial_channels",
]
