"""Slide layout builders.

Every builder draws onto a blank 16:9 slide (10in x 5.625in) and returns the
shapes it added. Positions are in inches.

    title_slide    centred title, optional centred subtitle
    content        title band + full-width body
    two_column     title (accent colour) + body split into two columns
    image_content  title + body left, reused template image (or placeholder) right
    conclusion     centred title over centred body

Unknown layout names render as `content`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_AUTO_SHAPE_TYPE
from pptx.enum.text import MSO_VERTICAL_ANCHOR, PP_ALIGN
from pptx.text.text import Font
from pptx.util import Inches, Pt

from deckweave.core.logging import get_logger
from deckweave.core.models import (
    ExtractedImage,
    GenerationOptions,
    SlideContent,
    StyleContext,
    TemplateAnalysis,
)

logger = get_logger(__name__)

Box = tuple[float, float, float, float]

PARAGRAPH_SEPARATOR = "\n\n"
IMAGE_BOX: Box = (5.5, 2.0, 4.0, 2.5)
PLACEHOLDER_TEXT = "\U0001F4CA Template Image\nPlaceholder"
PLACEHOLDER_FILL = "F3F4F6"


def _rgb_from_any(v: Any) -> RGBColor | None:
    """Parse RGB from '#RRGGBB' or 'RRGGBB'."""
    if not isinstance(v, str):
        return None
    s = v.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6:
        return None
    try:
        return RGBColor.from_string(s.upper())
    except ValueError:
        return None


def _add_text(
    slide: Any,
    text: str,
    box: Box,
    *,
    size: int,
    font: str,
    color: str,
    bold: bool = False,
    align: PP_ALIGN = PP_ALIGN.LEFT,
    valign: MSO_VERTICAL_ANCHOR = MSO_VERTICAL_ANCHOR.TOP,
) -> Any:
    x, y, w, h = box
    shape = slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h))
    tf = shape.text_frame
    tf.word_wrap = True
    tf.vertical_anchor = valign
    tf.text = text or ""
    _style_paragraphs(tf, size=size, font=font, color=color, bold=bold, align=align)
    return shape


def _style_paragraphs(tf: Any, *, size: int, font: str, color: str, bold: bool, align: PP_ALIGN) -> None:
    rgb = _rgb_from_any(color)
    for p in tf.paragraphs:
        p.alignment = align
        p.font.size = Pt(size)
        p.font.name = font
        if not p.runs:
            # blank lines take their height from a:endParaRPr
            end = Font(p._p.get_or_add_endParaRPr())
            end.size = Pt(size)
            end.name = font
        for run in p.runs:
            run.font.size = Pt(size)
            run.font.name = font
            run.font.bold = bold
            if rgb is not None:
                run.font.color.rgb = rgb


def split_columns(content: str) -> tuple[str, str]:
    """Split blank-line separated paragraphs into (left, right); left gets the odd one."""
    parts = (content or "").split(PARAGRAPH_SEPARATOR)
    half = (len(parts) + 1) // 2
    return PARAGRAPH_SEPARATOR.join(parts[:half]), PARAGRAPH_SEPARATOR.join(parts[half:])


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_title_slide(slide: Any, record: SlideContent, style: StyleContext, analysis: Optional[TemplateAnalysis] = None) -> list[Any]:
    shapes = [
        _add_text(
            slide, record.title, (0.5, 1.5, 9.0, 1.8),
            size=40, font=style.title_font, color=style.title_color, bold=True,
            align=PP_ALIGN.CENTER, valign=MSO_VERTICAL_ANCHOR.MIDDLE,
        )
    ]
    if record.content:
        shapes.append(
            _add_text(
                slide, record.content, (0.5, 3.5, 9.0, 1.2),
                size=20, font=style.body_font, color=style.accent_color,
                align=PP_ALIGN.CENTER, valign=MSO_VERTICAL_ANCHOR.MIDDLE,
            )
        )
    return shapes


def build_content_slide(slide: Any, record: SlideContent, style: StyleContext, analysis: Optional[TemplateAnalysis] = None) -> list[Any]:
    return [
        _add_text(
            slide, record.title, (0.5, 0.3, 9.0, 1.0),
            size=32, font=style.title_font, color=style.title_color, bold=True,
        ),
        _add_text(
            slide, record.content, (0.5, 1.5, 9.0, 3.5),
            size=18, font=style.body_font, color=style.text_color,
        ),
    ]


def build_two_column_slide(slide: Any, record: SlideContent, style: StyleContext, analysis: Optional[TemplateAnalysis] = None) -> list[Any]:
    left, right = split_columns(record.content)
    return [
        # accent colour, not title colour, for two-column titles
        _add_text(
            slide, record.title, (0.5, 0.3, 9.0, 1.0),
            size=32, font=style.title_font, color=style.accent_color, bold=True,
        ),
        _add_text(
            slide, left, (0.5, 1.5, 4.2, 3.5),
            size=18, font=style.body_font, color=style.text_color,
        ),
        _add_text(
            slide, right, (5.2, 1.5, 4.2, 3.5),
            size=18, font=style.body_font, color=style.text_color,
        ),
    ]


def select_image_for_reuse(analysis: Optional[TemplateAnalysis]) -> Optional[ExtractedImage]:
    """First extracted image, in extraction order. No content matching."""
    if analysis is None or not analysis.extracted_images:
        return None
    return analysis.extracted_images[0]


def add_image_placeholder(slide: Any, style: StyleContext) -> Any:
    x, y, w, h = IMAGE_BOX
    shape = slide.shapes.add_shape(MSO_AUTO_SHAPE_TYPE.RECTANGLE, Inches(x), Inches(y), Inches(w), Inches(h))
    shape.fill.solid()
    shape.fill.fore_color.rgb = _rgb_from_any(PLACEHOLDER_FILL)
    accent = _rgb_from_any(style.accent_color)
    if accent is not None:
        shape.line.color.rgb = accent
    shape.line.width = Pt(1)

    tf = shape.text_frame
    tf.word_wrap = True
    tf.vertical_anchor = MSO_VERTICAL_ANCHOR.MIDDLE
    tf.text = PLACEHOLDER_TEXT
    _style_paragraphs(tf, size=14, font=style.body_font, color=style.accent_color, bold=False, align=PP_ALIGN.CENTER)
    return shape


def _add_reused_image(slide: Any, image: ExtractedImage) -> Any | None:
    if not Path(image.file_path).exists():
        logger.info("reused_image_missing", path=image.file_path)
        return None
    x, y, w, h = IMAGE_BOX
    try:
        pic = slide.shapes.add_picture(image.file_path, Inches(x), Inches(y), width=Inches(w), height=Inches(h))
    except Exception as e:
        # e.g. EMF/WMF that python-pptx cannot size
        logger.warning("reused_image_rejected", image=image.original_name, error=str(e))
        return None
    logger.info("template_image_reused", image=image.original_name)
    return pic


def build_image_content_slide(slide: Any, record: SlideContent, style: StyleContext, analysis: Optional[TemplateAnalysis] = None) -> list[Any]:
    shapes = [
        _add_text(
            slide, record.title, (0.5, 0.5, 9.0, 0.8),
            size=28, font=style.title_font, color=style.title_color, bold=True,
        ),
        _add_text(
            slide, record.content, (0.5, 1.5, 4.5, 3.5),
            size=16, font=style.body_font, color=style.text_color,
        ),
    ]

    image = select_image_for_reuse(analysis)
    pic = _add_reused_image(slide, image) if image is not None else None
    shapes.append(pic if pic is not None else add_image_placeholder(slide, style))
    return shapes


def build_conclusion_slide(slide: Any, record: SlideContent, style: StyleContext, analysis: Optional[TemplateAnalysis] = None) -> list[Any]:
    return [
        _add_text(
            slide, record.title, (1.0, 1.5, 8.0, 1.0),
            size=32, font=style.title_font, color=style.title_color, bold=True,
            align=PP_ALIGN.CENTER,
        ),
        _add_text(
            slide, record.content, (1.0, 2.8, 8.0, 2.0),
            size=18, font=style.body_font, color=style.text_color,
            align=PP_ALIGN.CENTER, valign=MSO_VERTICAL_ANCHOR.MIDDLE,
        ),
    ]


Builder = Callable[[Any, SlideContent, StyleContext, Optional[TemplateAnalysis]], list[Any]]

LAYOUT_BUILDERS: dict[str, Builder] = {
    "title_slide": build_title_slide,
    "content": build_content_slide,
    "two_column": build_two_column_slide,
    "image_content": build_image_content_slide,
    "conclusion": build_conclusion_slide,
}


def builder_for(layout: str) -> Builder:
    return LAYOUT_BUILDERS.get(layout, build_content_slide)


def add_speaker_notes(slide: Any, record: SlideContent, options: GenerationOptions) -> bool:
    if not record.speaker_notes or not options.include_notes:
        return False
    slide.notes_slide.notes_text_frame.text = record.speaker_notes
    return True


def set_background(slide: Any, color: str) -> None:
    rgb = _rgb_from_any(color)
    if rgb is None:
        return
    fill = slide.background.fill
    fill.solid()
    fill.fore_color.rgb = rgb


def build_slide(
    slide: Any,
    record: SlideContent,
    style: StyleContext,
    options: GenerationOptions,
    analysis: Optional[TemplateAnalysis] = None,
) -> list[Any]:
    """Background, layout body and speaker notes for one slide."""
    set_background(slide, style.background_color)
    shapes = builder_for(record.layout_kind)(slide, record, style, analysis)
    add_speaker_notes(slide, record, options)
    logger.debug("slide_built", slide_number=record.slide_number, layout=record.layout_kind, shapes=len(shapes))
    return shapes
