from __future__ import annotations

from typing import Any, List


def split_path(path: str) -> List[str]:
    if path is None:
        return []
    if not isinstance(path, str):
        path = str(path)
    return [p for p in path.split('.') if p != '']


def get_value_by_path(data: Any, path: str, default: Any = None) -> Any:
    """Retrieve a value from nested dicts using a dot-notation path.

    Returns `default` when any segment is missing, null, or traverses into a
    non-dict value. Keys that themselves contain dots (e.g. 'app.version')
    are matched before giving up on a segment.
    """
    keys = split_path(path)
    if not keys:
        return default

    val = data
    i = 0
    while i < len(keys):
        if not isinstance(val, dict):
            return default

        key = keys[i]
        if key in val:
            val = val[key]
            i += 1
        else:
            matched = False
            candidate = key
            for j in range(i + 1, len(keys)):
                candidate = candidate + '.' + keys[j]
                if candidate in val:
                    val = val[candidate]
                    i = j + 1
                    matched = True
                    break
            if not matched:
                return default

        if val is None:
            return default

    return val

