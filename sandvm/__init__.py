from sandvm.config import Config
from sandvm.core.decoder import decode_result, parse_status, strip_cr
from sandvm.core.kernel import resolve_kernel, running_kernel
from sandvm.core.launcher import Launcher, SandboxRun
from sandvm.core.memory import estimate_memory, format_memory
from sandvm.core.runner import prepare_payload, run_payload
from sandvm.types import BootPayload, KernelImage, RunOutcome

__all__ = [
	"Config",
	"BootPayload",
	"KernelImage",
	"RunOutcome",
	"Launcher",
	"SandboxRun",
	"estimate_memory",
	"format_memory",
	"resolve_kernel",
	"running_kernel",
	"decode_result",
	"parse_status",
	"strip_cr",
	"prepare_payload",
	"run_payload",
]
