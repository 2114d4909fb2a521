from __future__ import annotations

import json
import os
from typing import Any, Optional
import collections.abc

import yaml

from seqrt.seqrt_datatypes import Sequence

# File extension -> format name
FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def format_for_path(path: str) -> Optional[str]:
    return FORMATS.get(os.path.splitext(path)[1].lower())


def _to_builtin(obj: Any) -> Any:
    # Sequences become plain lists; holes and Absent are written as null
    if isinstance(obj, Sequence):
        return [_to_builtin(x) for x in obj.to_list(hole=None)]
    if isinstance(obj, collections.abc.Mapping):
        return {k: _to_builtin(v) for k, v in obj.items()}
    return obj


def _to_sequences(obj: Any) -> Any:
    if isinstance(obj, list):
        return Sequence(_to_sequences(x) for x in obj)
    if isinstance(obj, collections.abc.Mapping):
        return {k: _to_sequences(v) for k, v in obj.items()}
    return obj


def deserialize(text: str, *, fmt: str) -> Any:
    """
    Parse json or yaml text. Every array, nested ones included, becomes a
    `Sequence`; null entries stay `None` values rather than holes.
    """
    if fmt == 'json':
        value = json.loads(text)
    elif fmt == 'yaml':
        value = yaml.safe_load(text)
    else:
        raise ValueError(f"Unsupported serialization format: {fmt!r}")
    return _to_sequences(value)


def serialize(value: Any, *, fmt: str) -> str:
    built = _to_builtin(value)
    if fmt == 'json':
        return json.dumps(built, ensure_ascii=False, indent=2)
    if fmt == 'yaml':
        return yaml.safe_dump(built, sort_keys=False)
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


__all__ = [
    "deserialize",
    "serialize",
    "format_for_path",
]
