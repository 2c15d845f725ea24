"""Error model for deckweave.

Analysis-side failures are absorbed into default values and never raised to
callers; only the classes below cross a public boundary.
"""

from __future__ import annotations

from typing import Any, Dict


class DeckweaveError(Exception):
    """Base typed exception with stable error code and metadata."""

    code = "DECKWEAVE_ERROR"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ContainerError(DeckweaveError):
    """Bytes are not a readable zip container."""

    code = "CONTAINER_ERROR"


class ContentModelError(DeckweaveError):
    """Slide content model does not conform to its schema."""

    code = "CONTENT_MODEL_ERROR"


class GenerationFailure(DeckweaveError):
    """The output document could not be serialized or written."""

    code = "GENERATION_FAILURE"
