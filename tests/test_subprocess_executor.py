from __future__ import annotations

import subprocess
import sys

import pytest

from sandvm.config import Config
from sandvm.core.launcher import Launcher
from sandvm.errors import SVMLaunchError, SVMTimeout
from sandvm.hypervisor import ProcessSpec, SubprocessExecutor
from sandvm.types import BootPayload, KernelImage


@pytest.fixture()
def executor() -> SubprocessExecutor:
    return SubprocessExecutor()


def test_which_finds_interpreter(executor):
    assert executor.which(sys.executable) is not None
    assert executor.which("svm-no-such-binary") is None


def test_which_rejects_non_executable_file(executor, tmp_path):
    f = tmp_path / "not-qemu"
    f.write_text("#!/bin/sh\n")
    f.chmod(0o644)
    assert executor.which(str(f)) is None


def test_run_returns_child_exit_code(executor):
    res = executor.run(ProcessSpec(sys.executable, ["-c", "raise SystemExit(3)"]))
    assert res.returncode == 3
    assert res.duration_s >= 0


@pytest.mark.timeout(30)
def test_run_kills_child_on_timeout(executor):
    with pytest.raises(subprocess.TimeoutExpired):
        executor.run(ProcessSpec(sys.executable, ["-c", "import time; time.sleep(20)"]), timeout=1)


def test_missing_binary_raises_oserror(executor, tmp_path):
    with pytest.raises(OSError):
        executor.run(ProcessSpec(str(tmp_path / "svm-no-such-binary")))


def test_non_executable_binary_raises_oserror(executor, tmp_path):
    f = tmp_path / "not-qemu"
    f.write_text("#!/bin/sh\n")
    f.chmod(0o644)
    with pytest.raises(OSError):
        executor.run(ProcessSpec(str(f)))


class _SkipLookup(SubprocessExecutor):
    """Always claims the binary exists so the start itself is exercised."""

    def which(self, binary):
        return binary


def _launch(cfg, executor, payload, kernel, tmp_path):
    return Launcher(cfg, executor).launch(BootPayload.from_path(payload), KernelImage(kernel), tmp_path / "r.out", tmp_path / "r.rc")


def test_launcher_maps_start_failure_to_launch_error(payload, kernel, tmp_path):
    f = tmp_path / "not-qemu"
    f.write_text("#!/bin/sh\n")
    f.chmod(0o644)
    with pytest.raises(SVMLaunchError):
        _launch(Config(qemu_binary=str(f)), _SkipLookup(), payload, kernel, tmp_path)


def test_launcher_rejects_non_executable_binary(payload, kernel, tmp_path):
    f = tmp_path / "not-qemu"
    f.write_text("#!/bin/sh\n")
    f.chmod(0o644)
    (tmp_path / "r.rc").write_bytes(b"0\n")
    with pytest.raises(SVMLaunchError):
        _launch(Config(qemu_binary=str(f)), SubprocessExecutor(), payload, kernel, tmp_path)
    assert (tmp_path / "r.rc").read_bytes() == b"0\n"


class _SleepingExecutor(SubprocessExecutor):
    """Runs a sleeping child in place of the hypervisor argv."""

    def run(self, spec, timeout=None):
        return super().run(ProcessSpec(sys.executable, ["-c", "import time; time.sleep(20)"]), timeout=timeout)


@pytest.mark.timeout(30)
def test_launcher_timeout_kills_real_child(payload, kernel, tmp_path):
    with pytest.raises(SVMTimeout):
        _launch(Config(qemu_binary=sys.executable, timeout=1), _SleepingExecutor(), payload, kernel, tmp_path)
