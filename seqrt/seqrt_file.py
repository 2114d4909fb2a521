from __future__ import annotations
import logging
import os
from typing import Optional
from seqrt.seqrt_datatypes import Sequence
from seqrt.seqrt_serialize import deserialize, serialize, format_for_path

logger = logging.getLogger(__name__)


def resolve_path(locator: str, base_dir: Optional[str]) -> str:
    """Maps `file://...` or a bare path onto the filesystem, relative to `base_dir` (or CWD)."""
    rest = locator[7:] if locator.startswith("file://") else locator
    if rest.startswith("~"):
        return os.path.expanduser(rest)
    if os.path.isabs(rest):
        return os.path.normpath(rest)
    return os.path.normpath(os.path.join(base_dir or os.getcwd(), rest))


async def load_sequence(locator: str, *, base_dir: Optional[str] = None) -> Sequence:
    path = resolve_path(locator, base_dir)
    fmt = format_for_path(path)
    if fmt is None:
        raise ValueError(f"Cannot load {path}: expected a .json, .yaml or .yml file")
    logger.debug("loading %s as %s", path, fmt)
    with open(path, "r", encoding="utf-8") as f:
        value = deserialize(f.read(), fmt=fmt)
    if not isinstance(value, Sequence):
        raise TypeError(f"{path} holds a {type(value).__name__}, not an array")
    return value


async def save_sequence(locator: str, seq: Sequence, *, base_dir: Optional[str] = None) -> str:
    path = resolve_path(locator, base_dir)
    fmt = format_for_path(path)
    if fmt is None:
        raise ValueError(f"Cannot save {path}: expected a .json, .yaml or .yml file")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    logger.debug("saving %d slots to %s", len(seq), path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(serialize(seq, fmt=fmt))
    return path
