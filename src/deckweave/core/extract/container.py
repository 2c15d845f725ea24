"""Read-only access to a PPTX (zip + XML parts) held in memory."""

from __future__ import annotations

import re
import zipfile
from io import BytesIO
from typing import Optional, Pattern

from deckweave.core.errors import ContainerError

_DIGITS = re.compile(r"(\d+)")


def numeric_part_key(name: str) -> tuple:
    """Sort key so slide2.xml sorts before slide10.xml."""
    return tuple(int(tok) if tok.isdigit() else tok for tok in _DIGITS.split(name))


class Container:
    """Named-part lookup over a zip archive.

    Parts are read on demand; the archive stays in memory for the lifetime of
    the object. Missing parts are reported as None, never as errors.
    """

    def __init__(self, zf: zipfile.ZipFile, name: str = "") -> None:
        self._zf = zf
        self.name = name
        self._names = zf.namelist()

    @classmethod
    def open(cls, data: bytes, name: str = "") -> "Container":
        try:
            zf = zipfile.ZipFile(BytesIO(data), "r")
        except (zipfile.BadZipFile, ValueError, TypeError) as e:
            raise ContainerError("not a valid zip container", name=name, detail=str(e)) from e
        return cls(zf, name=name)

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._zf.close()

    def has_part(self, path: str) -> bool:
        return path in self._names

    def get_part(self, path: str) -> Optional[bytes]:
        if path not in self._names:
            return None
        return self._zf.read(path)

    def get_text(self, path: str, encoding: str = "utf-8") -> Optional[str]:
        blob = self.get_part(path)
        if blob is None:
            return None
        return blob.decode(encoding)

    def list_parts(self, pattern: str | Pattern[str]) -> list[str]:
        """Part names matching `pattern` (re.search), in archive listing order.

        Callers that need numeric order must sort with `numeric_part_key`.
        """
        rx = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [n for n in self._names if rx.search(n)]
