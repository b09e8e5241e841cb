"""
Utility helper functions
"""
from datetime import datetime, timezone
import re

_UNSAFE_ID = re.compile(r"[^A-Za-z0-9_\-]")
_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9_.\-]")


def safe_id(raw_id) -> str:
    """Replace every character outside [A-Za-z0-9_-] with '_'."""
    return _UNSAFE_ID.sub("_", str(raw_id if raw_id is not None else ""))


def template_filename(raw_id) -> str:
    """Template id -> file name inside the template store."""
    return f"{safe_id(raw_id)}.json"


def template_id_from_filename(name: str) -> str:
    return re.sub(r"\.json$", "", name, flags=re.IGNORECASE)


def ensure_json_filename(name: str) -> str:
    """Append .json when missing. Empty names are an error."""
    if not name:
        raise ValueError("missing filename")
    return name if name.endswith(".json") else f"{name}.json"


def safe_session_filename(raw_name) -> str:
    """
    Session file name from untrusted input: .json suffix, safe character set,
    no '..' runs. Already-safe names come back unchanged.
    """
    name = ensure_json_filename(str(raw_name or "").strip())
    name = _UNSAFE_FILENAME.sub("_", name)
    while ".." in name:
        name = name.replace("..", "_")
    return name


def session_filename(dt: datetime = None) -> str:
    """hearing_<YYYYMMDD>_<HHMMSS>.json from local wall-clock time"""
    now = dt or datetime.now()
    return now.strftime("hearing_%Y%m%d_%H%M%S.json")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

