"""Rendering package: style resolution, slide layouts and the .pptx writer.

Public API:
- `PresentationWriter(settings).generate(content, template_path=..., options=...)`
- `PresentationWriter(settings).render_bytes(content, template=..., options=...)`
- `resolve_style(analysis)`
"""

from __future__ import annotations

from .layouts import LAYOUT_BUILDERS, build_slide, builder_for
from .pptx_writer import PresentationWriter
from .style import DEFAULT_STYLE, resolve_style

__all__ = [
    "DEFAULT_STYLE",
    "LAYOUT_BUILDERS",
    "PresentationWriter",
    "build_slide",
    "builder_for",
    "resolve_style",
]
