from __future__ import annotations

import os
import tempfile
from pathlib import Path


def ensure_parent(path: Path) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_bytes(path: Path, data: bytes) -> None:
	ensure_parent(path)
	fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
	try:
		with os.fdopen(fd, "wb") as f:
			f.write(data)
		os.replace(tmp, path)
	except BaseException:
		Path(tmp).unlink(missing_ok=True)
		raise


def read_bytes_or_empty(path: Path) -> bytes:
	try:
		return path.read_bytes()
	except FileNotFoundError:
		return b""


def remove_if_exists(path: Path) -> bool:
	try:
		path.unlink()
		return True
	except FileNotFoundError:
		return False
