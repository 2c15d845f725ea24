"""Template analysis entry point.

    analyzer = TemplateAnalyzer(settings)
    analysis = analyzer.analyze(template_bytes, template_name="deck.pptx")

Theme, media and structure extraction run side by side in a small thread
pool and are joined before the results are merged. Whatever goes wrong, the
caller gets a TemplateAnalysis back (BASELINE_ANALYSIS in the worst case).
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from deckweave.core.config import Settings, get_settings
from deckweave.core.extract.container import Container
from deckweave.core.extract.media_extractor import MediaExtractor
from deckweave.core.extract.structure_analyzer import analyze_structure
from deckweave.core.extract.theme_extractor import extract_theme
from deckweave.core.logging import get_logger
from deckweave.core.models import BASELINE_ANALYSIS, ExtractedImage, StructureReport, TemplateAnalysis, ThemeData

logger = get_logger(__name__)


def merge_analysis(
    theme: ThemeData,
    images: list[ExtractedImage],
    structure: StructureReport,
) -> TemplateAnalysis:
    fonts = [theme.font_scheme.major_font, theme.font_scheme.minor_font]
    return TemplateAnalysis(
        slide_count=structure.slide_count,
        image_count=len(images),
        layout_count=structure.layout_count,
        colors=tuple(c for c in theme.color_scheme.values() if c),
        fonts=tuple(f for f in fonts if f),
        master_layouts=structure.master_layouts,
        extracted_images=tuple(images),
        theme_data=theme,
    )


class TemplateAnalyzer:
    def __init__(self, settings: Settings | None = None, media: MediaExtractor | None = None) -> None:
        self.settings = settings or get_settings()
        self.media = media or MediaExtractor(self.settings.images_dir)

    def analyze(self, data: bytes, template_name: str = "") -> TemplateAnalysis:
        """Analyze template bytes. Never raises."""
        try:
            with Container.open(data, name=template_name) as container:
                with ThreadPoolExecutor(max_workers=max(1, self.settings.analysis_workers)) as pool:
                    f_theme = pool.submit(extract_theme, container)
                    f_images = pool.submit(self.media.extract, container, template_name)
                    f_structure = pool.submit(analyze_structure, container)
                    theme = f_theme.result()
                    images = f_images.result()
                    structure = f_structure.result()
            analysis = merge_analysis(theme, images, structure)
        except Exception as e:
            logger.warning("template_analysis_failed", template=template_name, error=str(e))
            return BASELINE_ANALYSIS

        logger.info(
            "template_analysis_completed",
            template=template_name,
            colors=len(analysis.colors),
            fonts=", ".join(analysis.fonts),
            images=analysis.image_count,
            slides=analysis.slide_count,
        )
        return analysis

    def analyze_file(self, path: str | Path) -> TemplateAnalysis:
        p = Path(path)
        try:
            data = p.read_bytes()
        except OSError as e:
            logger.warning("template_unreadable", path=str(p), error=str(e))
            return BASELINE_ANALYSIS
        return self.analyze(data, template_name=p.name)


def analyze_template(data: bytes, template_name: str = "", settings: Settings | None = None) -> TemplateAnalysis:
    return TemplateAnalyzer(settings).analyze(data, template_name=template_name)
