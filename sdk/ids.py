from __future__ import annotations
import re, ulid
_ID_RE = re.compile(r"^[A-Za-z0-9_.-]{1,128}$")
def new_ulid() -> str: return str(ulid.new())
def is_valid_timer_id(value: str) -> bool: return bool(_ID_RE.match(value))
