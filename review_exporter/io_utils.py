from __future__ import annotations

import json
import os
from typing import Any


def source_name(file_obj: Any) -> str:
    """Display name for an uploaded file, file object or path."""
    if file_obj is None:
        return ""
    if isinstance(file_obj, (str, os.PathLike)):
        return os.path.basename(os.fspath(file_obj))
    name = getattr(file_obj, 'orig_name', None) or getattr(file_obj, 'name', None)
    if name:
        return os.path.basename(str(name))
    return repr(file_obj)


def read_text_content(file_obj: Any) -> str:
    """Read the raw text of an uploaded file, file-like object or path."""
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8-sig')
        return content

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8-sig') as f:
        return f.read()


def parse_json_text(content: Any) -> Any:
    if isinstance(content, (bytes, bytearray)):
        content = content.decode('utf-8-sig')
    if content.startswith('\ufeff'):
        content = content[1:]
    return json.loads(content)
