from __future__ import annotations

import re
import uuid
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Optional

from pptx import Presentation
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches

from deckweave.core.config import Settings, get_settings
from deckweave.core.errors import GenerationFailure
from deckweave.core.extract.template_analyzer import TemplateAnalyzer
from deckweave.core.logging import get_logger
from deckweave.core.models import GenerationOptions, PresentationContent, TemplateAnalysis
from deckweave.core.render.layouts import build_slide, set_background
from deckweave.core.render.style import resolve_style

logger = get_logger(__name__)

SLIDE_WIDTH_IN = 10.0
SLIDE_HEIGHT_IN = 5.625
BLANK_LAYOUT_INDEX = 6  # "Blank" in python-pptx's default template

MASTER_TITLE_PT = 28
MASTER_BODY_PT = 16


def sanitize_title(title: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", title or "")


def _set_text_style(master: Any, style_tag: str, *, font: str, color: str, size_pt: int) -> None:
    """Rewrite lvl1 defaults of p:txStyles/<style_tag> on a slide master.

    style_tag: 'p:titleStyle' | 'p:bodyStyle'
    """
    tx_styles = master._element.find(qn("p:txStyles"))
    if tx_styles is None:
        return
    style_el = tx_styles.find(qn(style_tag))
    if style_el is None:
        return
    lvl = style_el.find(qn("a:lvl1pPr"))
    if lvl is None:
        lvl = OxmlElement("a:lvl1pPr")
        style_el.insert(0, lvl)
    def_rpr = lvl.find(qn("a:defRPr"))
    if def_rpr is None:
        def_rpr = OxmlElement("a:defRPr")
        lvl.append(def_rpr)

    def_rpr.set("sz", str(int(size_pt * 100)))

    # a:ln (if any) must stay first; the fill follows it
    old_fill = def_rpr.find(qn("a:solidFill"))
    if old_fill is not None:
        def_rpr.remove(old_fill)
    solid = OxmlElement("a:solidFill")
    clr = OxmlElement("a:srgbClr")
    clr.set("val", color)
    solid.append(clr)
    def_rpr.insert(1 if def_rpr.find(qn("a:ln")) is not None else 0, solid)

    latin = def_rpr.find(qn("a:latin"))
    if latin is None:
        latin = OxmlElement("a:latin")
        ea = def_rpr.find(qn("a:ea"))
        if ea is not None:
            ea.addprevious(latin)
        else:
            def_rpr.append(latin)
    latin.set("typeface", font)


def apply_master_theme(prs: Any, analysis: TemplateAnalysis) -> None:
    """Carry the template theme onto the slide master (background + title/body styles)."""
    colors = analysis.theme_data.color_scheme
    fonts = analysis.theme_data.font_scheme
    master = prs.slide_master

    set_background(master, colors.background1)
    _set_text_style(
        master, "p:titleStyle",
        font=fonts.major_font, color=colors.accent1.lstrip("#"), size_pt=MASTER_TITLE_PT,
    )
    _set_text_style(
        master, "p:bodyStyle",
        font=fonts.minor_font, color=colors.text1.lstrip("#"), size_pt=MASTER_BODY_PT,
    )
    logger.info(
        "master_theme_applied",
        background=colors.background1,
        accent1=colors.accent1,
        major_font=fonts.major_font,
        minor_font=fonts.minor_font,
    )


class PresentationWriter:
    """Builds .pptx documents from a content model and an optional template.

    Stateless apart from the configured directories; one instance can serve
    any number of concurrent generations.
    """

    def __init__(self, settings: Settings | None = None, analyzer: TemplateAnalyzer | None = None) -> None:
        self.settings = settings or get_settings()
        self.analyzer = analyzer or TemplateAnalyzer(self.settings)

    @property
    def uploads_dir(self) -> Path:
        return self.settings.uploads_dir

    def build(
        self,
        content: PresentationContent,
        analysis: Optional[TemplateAnalysis] = None,
        options: GenerationOptions | Dict[str, Any] | None = None,
    ) -> Any:
        """Return an in-memory python-pptx Presentation."""
        opts = options if isinstance(options, GenerationOptions) else GenerationOptions.from_dict(options)

        prs = Presentation()
        props = prs.core_properties
        props.author = self.settings.author
        props.title = content.title
        props.subject = self.settings.subject

        prs.slide_width = Inches(SLIDE_WIDTH_IN)
        prs.slide_height = Inches(SLIDE_HEIGHT_IN)

        if analysis is not None:
            apply_master_theme(prs, analysis)

        style = resolve_style(analysis)
        blank = prs.slide_layouts[BLANK_LAYOUT_INDEX]
        for record in content.slides:
            slide = prs.slides.add_slide(blank)
            build_slide(slide, record, style, opts, analysis)

        return prs

    def render_bytes(
        self,
        content: PresentationContent,
        template: Optional[bytes] = None,
        template_name: str = "",
        options: GenerationOptions | Dict[str, Any] | None = None,
    ) -> bytes:
        analysis = self.analyzer.analyze(template, template_name=template_name) if template is not None else None
        prs = self.build(content, analysis, options)
        buf = BytesIO()
        try:
            prs.save(buf)
        except Exception as e:
            raise GenerationFailure("could not serialize presentation", title=content.title, detail=str(e)) from e
        return buf.getvalue()

    def generate(
        self,
        content: PresentationContent,
        template_path: str | Path | None = None,
        options: GenerationOptions | Dict[str, Any] | None = None,
    ) -> Path:
        """Write `<uploads_dir>/<title>_<uuid>.pptx` and return its path.

        The template (when given and present on disk) is re-analyzed here even
        if the caller analyzed it before.
        """
        analysis: Optional[TemplateAnalysis] = None
        if template_path and Path(template_path).exists():
            logger.info("applying_template_styling", template=str(template_path))
            analysis = self.analyzer.analyze_file(template_path)

        prs = self.build(content, analysis, options)

        out_path = self.uploads_dir / f"{sanitize_title(content.title)}_{uuid.uuid4()}.pptx"
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            prs.save(str(out_path))
        except Exception as e:
            raise GenerationFailure("could not write presentation", path=str(out_path), detail=str(e)) from e

        logger.info(
            "presentation_generated",
            path=str(out_path),
            slides=len(content.slides),
            templated=analysis is not None,
        )
        return out_path

    def cleanup_file(self, path: str | Path) -> bool:
        p = Path(path)
        try:
            if p.exists():
                p.unlink()
                return True
        except OSError as e:
            logger.error("file_cleanup_failed", path=str(p), error=str(e))
        return False
