from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from sandvm.errors import SVMConfigurationError, SVMGuestFailure, SVMProtocolError


OutcomeKind = Literal["success", "failure", "protocol_error"]


@dataclass(frozen=True)
class BootPayload:
	path: Path
	size_bytes: int

	@classmethod
	def from_path(cls, path: str | Path) -> "BootPayload":
		p = Path(path)
		try:
			st = p.stat()
		except OSError as e:
			raise SVMConfigurationError(f"Boot payload {p} is not readable: {e}") from e
		if not p.is_file():
			raise SVMConfigurationError(f"Boot payload {p} is not a regular file")
		return cls(path=p, size_bytes=st.st_size)


@dataclass(frozen=True)
class KernelImage:
	path: Path


@dataclass
class RunOutcome:
	kind: OutcomeKind
	exit_code: int
	output: Optional[bytes] = None

	@property
	def ok(self) -> bool:
		return self.kind == "success"

	def raise_for_status(self) -> None:
		if self.kind == "protocol_error":
			raise SVMProtocolError("Guest did not report an exit status", exit_code=self.exit_code)
		if self.kind == "failure":
			raise SVMGuestFailure(f"Guest exited with status {self.exit_code}", exit_code=self.exit_code)
