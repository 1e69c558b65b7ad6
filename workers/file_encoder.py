"""Async file encoder — turns a raw file into its base64 transport form.

Reading and encoding run in a worker thread so a large file never blocks the
event loop; field edits and step transitions keep flowing while it works.
Each call is independent, so several files may finish in any order.
"""

import asyncio
import base64
from dataclasses import dataclass
from pathlib import Path

from wizard.state import SourceFile


@dataclass(frozen=True)
class EncodedFile:
    filename: str
    file_type: str
    data: str        # base64
    size: int


def _read_bytes(source: SourceFile) -> bytes:
    if source.content is not None:
        return source.content
    if source.path:
        return Path(source.path).read_bytes()
    raise ValueError(f"'{source.name}' has neither content nor a path")


def _encode_worker(source: SourceFile) -> EncodedFile:
    """Blocking part: read and base64-encode."""
    raw = _read_bytes(source)
    return EncodedFile(
        filename=source.name,
        file_type=source.mime_type,
        data=base64.b64encode(raw).decode("ascii"),
        size=len(raw),
    )


async def encode_file(source: SourceFile) -> EncodedFile:
    """Encode one file off the event loop. Raises OSError/ValueError on unreadable input."""
    return await asyncio.to_thread(_encode_worker, source)


def to_data_uri(encoded: str, file_type: str) -> str:
    return f"data:{file_type};base64,{encoded}"
