from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

import orjson

from deckweave.core.errors import ContentModelError
from deckweave.core.utils.schema_validate import validate_instance

# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

# (python field, JSON key, theme1.xml clrScheme child)
COLOR_SLOTS: tuple[tuple[str, str, str], ...] = (
    ("background1", "background1", "lt1"),
    ("text1", "text1", "dk1"),
    ("background2", "background2", "lt2"),
    ("text2", "text2", "dk2"),
    ("accent1", "accent1", "accent1"),
    ("accent2", "accent2", "accent2"),
    ("accent3", "accent3", "accent3"),
    ("accent4", "accent4", "accent4"),
    ("accent5", "accent5", "accent5"),
    ("accent6", "accent6", "accent6"),
    ("hyperlink", "hyperlink", "hlink"),
    ("followed_hyperlink", "followedHyperlink", "folHlink"),
)


@dataclass(frozen=True)
class ColorScheme:
    """The 12 theme colour slots as '#RRGGBB' strings. Every slot is always set."""

    background1: str
    text1: str
    background2: str
    text2: str
    accent1: str
    accent2: str
    accent3: str
    accent4: str
    accent5: str
    accent6: str
    hyperlink: str
    followed_hyperlink: str

    def values(self) -> list[str]:
        return [getattr(self, f.name) for f in fields(self)]

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, attr) for attr, key, _ in COLOR_SLOTS}


@dataclass(frozen=True)
class FontScheme:
    major_font: str = "Calibri"
    minor_font: str = "Calibri"

    def to_dict(self) -> Dict[str, str]:
        return {"majorFont": self.major_font, "minorFont": self.minor_font}


@dataclass(frozen=True)
class ThemeData:
    color_scheme: ColorScheme
    font_scheme: FontScheme
    # Reserved; effect schemes are not parsed yet.
    effect_scheme: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colorScheme": self.color_scheme.to_dict(),
            "fontScheme": self.font_scheme.to_dict(),
            "effectScheme": dict(self.effect_scheme),
        }


# Fallback when a template has no (readable) theme part.
DEFAULT_THEME = ThemeData(
    color_scheme=ColorScheme(
        background1="#FFFFFF",
        text1="#000000",
        background2="#E7E6E6",
        text2="#44546A",
        accent1="#5B9BD5",
        accent2="#70AD47",
        accent3="#A5A5A5",
        accent4="#FFC000",
        accent5="#4472C4",
        accent6="#C5504B",
        hyperlink="#0066CC",
        followed_hyperlink="#954F72",
    ),
    font_scheme=FontScheme(major_font="Calibri", minor_font="Calibri"),
)


# ---------------------------------------------------------------------------
# Template analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtractedImage:
    """An image part copied out of a template onto disk.

    The media extractor owns `file_path`; it stays on disk until
    `MediaExtractor.cleanup([id])` removes it.
    """

    id: str
    original_name: str
    file_path: str
    file_type: str
    slide_context: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "originalName": self.original_name,
            "filePath": self.file_path,
            "fileType": self.file_type,
        }
        if self.slide_context is not None:
            out["slideContext"] = self.slide_context
        if self.description is not None:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class StructureReport:
    slide_count: int
    layout_count: int
    master_layouts: tuple[str, ...]
    master_count: int = 0


@dataclass(frozen=True)
class TemplateAnalysis:
    slide_count: int
    image_count: int
    layout_count: int
    colors: tuple[str, ...]
    fonts: tuple[str, ...]
    master_layouts: tuple[str, ...]
    extracted_images: tuple[ExtractedImage, ...]
    theme_data: ThemeData

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slideCount": self.slide_count,
            "imageCount": self.image_count,
            "layoutCount": self.layout_count,
            "colors": list(self.colors),
            "fonts": list(self.fonts),
            "masterLayouts": list(self.master_layouts),
            "extractedImages": [img.to_dict() for img in self.extracted_images],
            "themeData": self.theme_data.to_dict(),
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict(), option=orjson.OPT_INDENT_2)


DEFAULT_LAYOUT_NAMES: tuple[str, ...] = (
    "Title Slide",
    "Content",
    "Two Column",
    "Image & Content",
    "Section Header",
)

# Returned by the aggregator when template bytes cannot be analyzed at all.
# Not the same palette as DEFAULT_THEME.
BASELINE_ANALYSIS = TemplateAnalysis(
    slide_count=12,
    image_count=0,
    layout_count=5,
    colors=("#2563EB", "#64748B", "#10B981", "#F59E0B"),
    fonts=("Calibri", "Arial"),
    master_layouts=DEFAULT_LAYOUT_NAMES,
    extracted_images=(),
    theme_data=ThemeData(
        color_scheme=ColorScheme(
            background1="#FFFFFF",
            text1="#000000",
            background2="#E7E6E6",
            text2="#44546A",
            accent1="#2563EB",
            accent2="#64748B",
            accent3="#10B981",
            accent4="#F59E0B",
            accent5="#8B5CF6",
            accent6="#EF4444",
            hyperlink="#0066CC",
            followed_hyperlink="#954F72",
        ),
        font_scheme=FontScheme(major_font="Calibri", minor_font="Calibri"),
    ),
)


# ---------------------------------------------------------------------------
# Slide content (produced by the external outline generator)
# ---------------------------------------------------------------------------

LAYOUT_KINDS: tuple[str, ...] = ("title_slide", "content", "two_column", "image_content", "conclusion")


@dataclass(frozen=True)
class SlideContent:
    slide_number: int
    title: str
    content: str
    layout: str = "content"
    speaker_notes: Optional[str] = None
    # Descriptive only; builders do not consume it.
    image_prompt: Optional[str] = None

    @property
    def layout_kind(self) -> str:
        """`layout` restricted to the known kinds; anything else is 'content'."""
        return self.layout if self.layout in LAYOUT_KINDS else "content"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlideContent":
        return cls(
            slide_number=int(data["slideNumber"]),
            title=str(data["title"]),
            content=str(data.get("content") or ""),
            layout=str(data.get("layout") or "content"),
            speaker_notes=data.get("speakerNotes") or None,
            image_prompt=data.get("imagePrompt") or None,
        )


@dataclass(frozen=True)
class PresentationContent:
    title: str
    slides: tuple[SlideContent, ...]
    total_slides: int
    estimated_duration: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "PresentationContent":
        """Validate against content_model.schema.json and build the model.

        Raises ContentModelError listing every schema violation.
        """
        errors = validate_instance("content_model", data)
        if errors:
            raise ContentModelError("content model does not conform to schema", errors=errors)

        slides = tuple(SlideContent.from_dict(s) for s in data["slides"])
        total = data.get("totalSlides")
        return cls(
            title=str(data["title"]),
            slides=slides,
            total_slides=int(total) if total is not None else len(slides),
            estimated_duration=str(data.get("estimatedDuration") or ""),
        )

    @classmethod
    def from_json(cls, raw: bytes | str) -> "PresentationContent":
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise ContentModelError("content model is not valid JSON", detail=str(e)) from e
        return cls.from_dict(data)


NOTES_MODES: tuple[str, ...] = ("auto", "detailed", "brief", "none")

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _flag(v: Any, default: bool) -> bool:
    """Real booleans pass through; 'true'/'false' style strings are parsed; anything else keeps `default`."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
    return default


@dataclass(frozen=True)
class GenerationOptions:
    """Caller options. Only generate_notes == 'none' changes rendering today."""

    generate_notes: str = "auto"
    reuse_images: bool = True
    preserve_layouts: bool = True
    match_fonts: bool = True
    target_slides: str = "auto"
    presentation_style: str = "professional"
    content_density: str = "balanced"

    @property
    def include_notes(self) -> bool:
        return self.generate_notes != "none"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GenerationOptions":
        if not data:
            return cls()
        base = cls()
        return replace(
            base,
            generate_notes=str(data.get("generateNotes", base.generate_notes)),
            reuse_images=_flag(data.get("reuseImages"), base.reuse_images),
            preserve_layouts=_flag(data.get("preserveLayouts"), base.preserve_layouts),
            match_fonts=_flag(data.get("matchFonts"), base.match_fonts),
            target_slides=str(data.get("targetSlides", base.target_slides)),
            presentation_style=str(data.get("presentationStyle", base.presentation_style)),
            content_density=str(data.get("contentDensity", base.content_density)),
        )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StyleContext:
    """Render-ready styling. Colours are 'RRGGBB' (no leading '#')."""

    title_color: str
    text_color: str
    accent_color: str
    title_font: str
    body_font: str
    background_color: str = "FFFFFF"
