from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Optional

from deckweave.core.extract.container import Container, numeric_part_key
from deckweave.core.logging import get_logger
from deckweave.core.models import DEFAULT_LAYOUT_NAMES, StructureReport

logger = get_logger(__name__)

SLIDE_PART = re.compile(r"^ppt/slides/slide\d+\.xml$")
LAYOUT_PART = re.compile(r"^ppt/slideLayouts/slideLayout\d+\.xml$")
MASTER_PART = re.compile(r"^ppt/slideMasters/slideMaster\d+\.xml$")
PRIMARY_MASTER = "ppt/slideMasters/slideMaster1.xml"

# Reported when structure analysis itself blows up. Disagrees with the
# aggregator baseline (12 slides); see DESIGN.md, decision D1.
STRUCTURE_FALLBACK = StructureReport(
    slide_count=1,
    layout_count=5,
    master_layouts=DEFAULT_LAYOUT_NAMES,
    master_count=0,
)


def _layout_name(xml_bytes: bytes) -> Optional[str]:
    """Read p:sldLayout/p:cSld/@name."""
    root = ET.fromstring(xml_bytes)
    for el in root:
        tag = el.tag.split("}", 1)[-1]
        if tag == "cSld":
            name = (el.get("name") or "").strip()
            return name or None
    return None


def _layout_names(container: Container, layout_parts: list[str]) -> list[str]:
    names: list[str] = []
    for part in sorted(layout_parts, key=numeric_part_key):
        blob = container.get_part(part)
        if blob is None:
            continue
        try:
            name = _layout_name(blob)
        except ET.ParseError as e:
            logger.debug("layout_name_unreadable", part=part, error=str(e))
            continue
        if name:
            names.append(name)
    return names


def analyze_structure(container: Container) -> StructureReport:
    """Count slides / layouts / masters and list layout names. Never raises."""
    try:
        slides = container.list_parts(SLIDE_PART)
        layouts = container.list_parts(LAYOUT_PART)
        masters = container.list_parts(MASTER_PART)

        names: list[str] = []
        if container.has_part(PRIMARY_MASTER):
            names = _layout_names(container, layouts)
        if not names:
            names = list(DEFAULT_LAYOUT_NAMES)

        report = StructureReport(
            slide_count=len(slides),
            layout_count=len(layouts),
            master_layouts=tuple(names),
            master_count=len(masters),
        )
    except Exception as e:
        logger.warning("structure_analysis_failed", template=container.name, error=str(e))
        return STRUCTURE_FALLBACK

    logger.info(
        "structure_analyzed",
        template=container.name,
        slides=report.slide_count,
        layouts=report.layout_count,
        masters=report.master_count,
    )
    return report
