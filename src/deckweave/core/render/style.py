from __future__ import annotations

from typing import Optional

from deckweave.core.models import StyleContext, TemplateAnalysis

# Used when no template was supplied.
DEFAULT_STYLE = StyleContext(
    title_color="2563EB",
    text_color="1F2937",
    accent_color="64748B",
    title_font="Calibri",
    body_font="Calibri",
    background_color="FFFFFF",
)


def _bare(hex_color: str) -> str:
    return hex_color.lstrip("#").upper()


def resolve_style(analysis: Optional[TemplateAnalysis]) -> StyleContext:
    """Map a template analysis (or None) onto render-ready styling."""
    if analysis is None:
        return DEFAULT_STYLE

    colors = analysis.theme_data.color_scheme
    fonts = analysis.theme_data.font_scheme
    return StyleContext(
        title_color=_bare(colors.accent1),
        text_color=_bare(colors.text1),
        accent_color=_bare(colors.accent2),
        title_font=fonts.major_font,
        body_font=fonts.minor_font,
        background_color=_bare(colors.background1),
    )
