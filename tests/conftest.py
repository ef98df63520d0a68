from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional

import pytest

from sandvm.config import Config
from sandvm.hypervisor import Executor, ProcessResult, ProcessSpec


class FakeExecutor(Executor):
    """Records specs and plays the guest by writing the file-backed sinks."""

    def __init__(self, output: bytes = b"", status: bytes = b"0\r\n", present: bool = True, error: Optional[BaseException] = None):
        self.output = output
        self.status = status
        self.present = present
        self.error = error
        self.specs: List[ProcessSpec] = []
        self.timeouts: List[Optional[int]] = []

    def which(self, binary: str) -> Optional[str]:
        return f"/usr/bin/{binary}" if self.present else None

    def run(self, spec: ProcessSpec, timeout: Optional[int] = None) -> ProcessResult:
        self.specs.append(spec)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        out_sink, rc_sink = spec.sinks()
        with open(out_sink, "ab") as f:
            f.write(self.output)
        with open(rc_sink, "ab") as f:
            f.write(self.status)
        return ProcessResult(returncode=0, duration_s=0.01)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("SVM_QEMU", "SVM_INIT", "SVM_LOGLEVEL", "SVM_MIN_MEMORY_MB", "SVM_MEMORY_MULTIPLIER", "SVM_KVM", "SVM_TIMEOUT", "SVM_KERNEL", "SVM_EXTRA_ARGS"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def cfg() -> Config:
    return Config()


@pytest.fixture()
def payload(tmp_path) -> Path:
    p = tmp_path / "guest.initrd"
    p.write_bytes(b"\x00" * 4096)
    return p


@pytest.fixture()
def kernel(tmp_path) -> Path:
    k = tmp_path / "vmlinuz-test"
    k.write_bytes(b"kernel")
    return k


@pytest.fixture()
def fake_executor() -> FakeExecutor:
    return FakeExecutor(output=b"hello\r\nworld\r\n")


def require_qemu(binary: str = "qemu-system-x86_64") -> str:
    path = shutil.which(binary)
    if not path:
        pytest.skip(f"{binary} not available")
    return path
