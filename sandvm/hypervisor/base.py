"""Base classes and data structures for hypervisor process execution."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional


SerialBackend = Literal["stdio", "file"]


@dataclass(frozen=True)
class SerialBinding:
    """One guest serial port and the host side it is wired to."""
    index: int
    backend: SerialBackend
    path: Optional[Path] = None  # only for "file" backends

    @property
    def chardev_id(self) -> str:
        return f"char{self.index}"


@dataclass
class ProcessSpec:
    """Everything needed to start one hypervisor process."""
    binary: str
    args: List[str] = field(default_factory=list)
    channels: List[SerialBinding] = field(default_factory=list)

    @property
    def argv(self) -> List[str]:
        return [self.binary, *self.args]

    def sinks(self) -> List[Path]:
        """Host files written by file-backed serial channels."""
        return [c.path for c in self.channels if c.backend == "file" and c.path is not None]


@dataclass
class ProcessResult:
    """Result of running a hypervisor process to completion."""
    returncode: int
    duration_s: float


class Executor(ABC):
    """Abstract base class for running a hypervisor process."""

    @abstractmethod
    def which(self, binary: str) -> Optional[str]:
        """Resolve the binary to an executable path, or None if absent."""
        pass

    @abstractmethod
    def run(self, spec: ProcessSpec, timeout: Optional[int] = None) -> ProcessResult:
        """Start the process, wait for it to exit and return its result.

        Raises OSError if the process cannot be started and
        subprocess.TimeoutExpired if ``timeout`` elapses.
        """
        pass
