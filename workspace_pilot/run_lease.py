from __future__ import annotations

import json
import os
import socket
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, Optional


def _now() -> float:
	"""Internal helper for time; aids testing and staleness calculations."""
	return time.time()


def default_owner() -> str:
	return f"{socket.gethostname()}:{os.getpid()}"


def read_lease(path: Path) -> Dict[str, Any]:
	"""Return the current lease record (owner/ts), best effort."""
	try:
		if path.exists():
			data = json.loads(path.read_text(encoding="utf-8")) or {}
			return data if isinstance(data, dict) else {}
	except Exception:
		return {}
	return {}


def is_lease_stale(lease: Dict[str, Any], max_age_s: float) -> bool:
	"""Return True if a lease is older than max_age_s.

	A lease without a timestamp is never stale; max_age_s <= 0 disables
	expiry altogether.
	"""
	if max_age_s <= 0:
		return False
	try:
		ts = float(lease.get("ts", 0.0) or 0.0)
	except (TypeError, ValueError):
		return False
	if ts <= 0:
		return False
	return (_now() - ts) > max_age_s


def _create_exclusive(path: Path, record: Dict[str, Any]) -> bool:
	"""Publish `record` at `path` only if no lease file exists yet.

	The record is written to a temp file first and hard-linked into place, so
	readers never see a half-written lease and only one creator can win.
	"""
	fd, tmp = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
	try:
		with os.fdopen(fd, "w", encoding="utf-8") as f:
			json.dump(record, f, indent=2)
		try:
			os.link(tmp, path)
		except FileExistsError:
			return False
		return True
	finally:
		os.unlink(tmp)


def _retire(path: Path, seen: Dict[str, Any]) -> bool:
	"""Move the lease we judged free or stale out of the way.

	Returns False when the file changed since it was read; the newer lease is
	put back when possible.
	"""
	tomb = path.with_name(f"{path.name}.{os.getpid()}.{time.time_ns()}.old")
	try:
		os.rename(path, tomb)
	except FileNotFoundError:
		return True
	if read_lease(tomb) == seen:
		os.unlink(tomb)
		return True
	try:
		os.link(tomb, path)
	except FileExistsError:
		pass
	os.unlink(tomb)
	return False


def acquire_lease(path: Path, owner: str, max_age_s: float, layout_id: Optional[str] = None) -> bool:
	"""Take the run lease unless someone else holds a fresh one.

	Stale leases are taken over. Raises OSError when the lease directory is
	not writable.
	"""
	path.parent.mkdir(parents=True, exist_ok=True)
	record = {"owner": owner, "ts": _now(), "layout_id": layout_id}
	for _ in range(2):
		if _create_exclusive(path, record):
			return True
		current = read_lease(path)
		holder = current.get("owner") or ""
		if holder and holder != owner and not is_lease_stale(current, max_age_s):
			return False
		if not _retire(path, current):
			return False
	return False


def release_lease(path: Path, owner: str) -> None:
	"""Best-effort: drop the lease if `owner` still holds it."""
	try:
		if read_lease(path).get("owner") in (owner, "", None):
			path.unlink()
	except OSError:
		pass
