"""Decoding of the output and status serial channels.

The serial transport turns every LF the guest writes into CRLF. The status
channel carries a single ASCII base-10 integer, optionally followed by a line
ending. An empty status channel means the guest died before reporting and is
mapped to a fixed sentinel exit code.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from sandvm.config import PROTOCOL_ERROR_EXIT_CODE
from sandvm.types import RunOutcome
from sandvm.utils.fs import atomic_write_bytes, read_bytes_or_empty


logger = logging.getLogger(__name__)

# A process exit status is 0..255; anything else cannot be passed on intact
_STATUS_RE = re.compile(rb"\+?[0-9]{1,3}")
MAX_EXIT_STATUS = 255


def strip_cr(data: bytes) -> bytes:
	return data.replace(b"\r", b"")


def parse_status(data: bytes) -> Optional[int]:
	"""Return the exit code carried by ``data`` or None if there is none."""
	text = strip_cr(data).strip()
	if not _STATUS_RE.fullmatch(text):
		return None
	code = int(text)
	if code > MAX_EXIT_STATUS:
		return None
	return code


def decode_result(output_sink: Path, status_sink: Path, destination: Path) -> RunOutcome:
	raw_status = read_bytes_or_empty(Path(status_sink))
	code = parse_status(raw_status)
	if code is None:
		if strip_cr(raw_status).strip():
			logger.warning("Unparseable status channel content %r", raw_status[:64])
		else:
			logger.warning("Status channel is empty; guest exited without reporting")
		return RunOutcome(kind="protocol_error", exit_code=PROTOCOL_ERROR_EXIT_CODE)

	if code != 0:
		logger.info("Guest reported exit status %d; discarding output", code)
		return RunOutcome(kind="failure", exit_code=code)

	output = strip_cr(read_bytes_or_empty(Path(output_sink)))
	atomic_write_bytes(Path(destination), output)
	logger.info("Wrote %d bytes of guest output to %s", len(output), destination)
	return RunOutcome(kind="success", exit_code=0, output=output)
