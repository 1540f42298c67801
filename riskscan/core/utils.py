from __future__ import annotations

import io
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List, Optional, Union

import chardet  # type: ignore

from .errors import ReadError

BINARY_BYTES = bytes(range(0, 32)) + b"\x7f"
SNIFF_BYTES = 4096
DEFAULT_EXTENSIONS: FrozenSet[str] = frozenset({"php", "js"})


def is_likely_binary(data: bytes, control_threshold: float = 0.30) -> bool:
    if not data:
        return False
    if 0 in data:
        return True
    control = sum(1 for b in data if b in BINARY_BYTES and b not in (9, 10, 12, 13))
    return (control / len(data)) > control_threshold


def read_text_strict(path: Path) -> str:
    """Read ``path`` fully and decode it without loss.

    UTF-8 (with or without BOM) is tried first, then the encoding guessed by
    chardet. Raises ReadError for I/O failures, binary-looking content, or
    content that no candidate decodes strictly.
    """

    try:
        with path.open("rb") as f:
            data = f.read()
    except OSError as exc:
        raise ReadError(path, exc.strerror or str(exc)) from exc

    # control characters are only counted in the head; a NUL anywhere is binary
    if 0 in data or is_likely_binary(data[:SNIFF_BYTES]):
        raise ReadError(path, "binary content")

    try:
        return data.decode("utf-8-sig", errors="strict")
    except UnicodeDecodeError:
        pass

    guessed = chardet.detect(data).get("encoding")
    if guessed:
        try:
            return data.decode(guessed, errors="strict")
        except (LookupError, UnicodeDecodeError):
            pass
    raise ReadError(path, "undecodable text")


def iter_lines(text: str) -> Iterator[str]:
    # Split on "\n" only; a trailing "\r" is line-ending residue, not content.
    buf = io.StringIO(text)
    for line in buf:
        line = line.rstrip("\n")
        if line.endswith("\r"):
            line = line[:-1]
        yield line


def normalize_extensions(value: Optional[Union[str, Iterable[str]]]) -> FrozenSet[str]:
    """Turn ``"php, .js"`` or ``[".php", "js"]`` into ``{"php", "js"}``."""

    if value is None:
        return DEFAULT_EXTENSIONS
    items: Iterable[str] = value.split(",") if isinstance(value, str) else value
    cleaned: List[str] = []
    for item in items:
        ext = str(item).strip().lstrip(".")
        if ext:
            cleaned.append(ext)
    return frozenset(cleaned)


def extension_of(path: Path) -> Optional[str]:
    suffix = path.suffix
    if not suffix:
        return None
    return suffix[1:]


def has_eligible_extension(path: Path, extensions: FrozenSet[str]) -> bool:
    ext = extension_of(path)
    return ext is not None and ext in extensions
