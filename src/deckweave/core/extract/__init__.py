"""Template extraction package.

Turns template bytes into a TemplateAnalysis (theme, structure, media).

Public API:
- `TemplateAnalyzer(settings).analyze(data, template_name=...)`
- `analyze_template(data, template_name=..., settings=...)`
- `Container.open(data)` for raw part access
"""

from __future__ import annotations

from .container import Container
from .media_extractor import MediaExtractor
from .structure_analyzer import analyze_structure
from .template_analyzer import TemplateAnalyzer, analyze_template
from .theme_extractor import extract_theme

__all__ = [
    "Container",
    "MediaExtractor",
    "TemplateAnalyzer",
    "analyze_structure",
    "analyze_template",
    "extract_theme",
]
