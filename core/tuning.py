"""core/tuning.py — Data-driven combat constants.

Balance numbers (shield recharge, evasion defaults, spread, ramming
damage, spawner pacing …) live in ``data/tuning.toml``.  Any system
reads a value with::

    from core.tuning import get
    threshold = get("combat.shields", "recharge_threshold_ms", 2000.0)

Every call site passes its own default, so nothing breaks when the file
is missing or was never loaded (the test scripts rely on this).
``main.py`` loads the file once at startup; ``reload()`` re-reads it and
``override()`` patches a single value in memory.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli


DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "tuning.toml"

_data: dict = {}
_path: Path | None = None


def load(path: str | Path | None = None) -> int:
    """Load tuning constants from *path* (default ``data/tuning.toml``).

    Replaces whatever was loaded before, including overrides.  Returns
    the number of values read; a missing file loads nothing.
    """
    global _data, _path
    _path = Path(path) if path is not None else DEFAULT_PATH

    if not _path.exists():
        print(f"[TUNING] {_path} not found, using built-in defaults")
        _data = {}
        return 0

    with open(_path, "rb") as f:
        _data = tomllib.load(f)
    count = _count_leaves(_data)
    print(f"[TUNING] Loaded {count} values from {_path}")
    return count


def reload() -> int:
    """Re-read the last loaded file."""
    return load(_path)


def reset() -> None:
    """Forget everything; every ``get`` falls back to its default."""
    global _data, _path
    _data = {}
    _path = None


def override(section_path: str, key: str, value: Any) -> None:
    """Set one value in memory, creating tables as needed."""
    node = _data
    for part in section_path.split("."):
        node = node.setdefault(part, {})
    node[key] = value


def get(section_path: str, key: str, default=None):
    """Read ``[section_path] key``, or *default* if either is missing.

    >>> get("combat.shields", "recharge_rate", 0.5)
    0.5
    """
    table = _walk(section_path)
    if table is None:
        return default
    return table.get(key, default)


def section(section_path: str) -> dict:
    """Shallow copy of a whole table (``{}`` if absent)."""
    table = _walk(section_path)
    return dict(table) if table is not None else {}


def _walk(section_path: str) -> dict | None:
    node: Any = _data
    for part in section_path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node if isinstance(node, dict) else None


def _count_leaves(d: dict) -> int:
    return sum(_count_leaves(v) if isinstance(v, dict) else 1 for v in d.values())
