"""Theme (colour + font scheme) recovery from ppt/theme/theme1.xml.

Real-world producers encode the same theme colour several ways:

    <a:accent1><a:srgbClr val="4F81BD"/></a:accent1>
    <a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>
    <a:accent1 val="4F81BD"/>
    <a:accent1><a:scrgbClr ...><a:srgbClr val="4F81BD"/></a:scrgbClr></a:accent1>

Each slot is resolved by trying `COLOR_RESOLVERS` in order; the first hit
wins. Tags are matched by local name so namespace-less themes work too.
Any unexpected failure returns DEFAULT_THEME as a whole.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Callable, Optional

from deckweave.core.extract.container import Container
from deckweave.core.logging import get_logger
from deckweave.core.models import COLOR_SLOTS, DEFAULT_THEME, ColorScheme, FontScheme, ThemeData

logger = get_logger(__name__)

THEME_PART = "ppt/theme/theme1.xml"

_HEX6 = re.compile(r"^[0-9A-Fa-f]{6}$")


def _local(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _child(el: ET.Element, name: str) -> Optional[ET.Element]:
    for c in el:
        if _local(c.tag) == name:
            return c
    return None


def _hex(v: Optional[str]) -> Optional[str]:
    if v and _HEX6.match(v.strip()):
        return "#" + v.strip().upper()
    return None


# ---------------------------------------------------------------------------
# Colour resolver strategies
# ---------------------------------------------------------------------------


def _from_srgb(slot: ET.Element) -> Optional[str]:
    c = _child(slot, "srgbClr")
    return _hex(c.get("val")) if c is not None else None


def _from_sys_last(slot: ET.Element) -> Optional[str]:
    c = _child(slot, "sysClr")
    return _hex(c.get("lastClr")) if c is not None else None


def _from_own_val(slot: ET.Element) -> Optional[str]:
    return _hex(slot.get("val"))


def _from_nested_clr(slot: ET.Element) -> Optional[str]:
    for el in slot.iter():
        if el is slot:
            continue
        if "clr" not in _local(el.tag).lower():
            continue
        hit = _hex(el.get("val"))
        if hit:
            return hit
    return None


COLOR_RESOLVERS: tuple[Callable[[ET.Element], Optional[str]], ...] = (
    _from_srgb,
    _from_sys_last,
    _from_own_val,
    _from_nested_clr,
)


def resolve_color(slot: Optional[ET.Element]) -> Optional[str]:
    if slot is None:
        return None
    for resolver in COLOR_RESOLVERS:
        hit = resolver(slot)
        if hit:
            return hit
    return None


# ---------------------------------------------------------------------------
# Scheme parsing
# ---------------------------------------------------------------------------


def _theme_elements(root: ET.Element) -> Optional[ET.Element]:
    if _local(root.tag) == "themeElements":
        return root
    return _child(root, "themeElements")


def parse_color_scheme(root: ET.Element) -> ColorScheme:
    defaults = DEFAULT_THEME.color_scheme
    te = _theme_elements(root)
    scheme = _child(te, "clrScheme") if te is not None else None
    if scheme is None:
        logger.debug("theme_color_scheme_missing")
        return defaults

    values: dict[str, str] = {}
    for attr, _, xml_name in COLOR_SLOTS:
        values[attr] = resolve_color(_child(scheme, xml_name)) or getattr(defaults, attr)
    return ColorScheme(**values)


def _typeface(font_el: Optional[ET.Element]) -> Optional[str]:
    if font_el is None:
        return None
    latin = _child(font_el, "latin")
    if latin is None:
        return None
    tf = (latin.get("typeface") or "").strip()
    return tf or None


def parse_font_scheme(root: ET.Element) -> FontScheme:
    defaults = DEFAULT_THEME.font_scheme
    te = _theme_elements(root)
    scheme = _child(te, "fontScheme") if te is not None else None
    if scheme is None:
        logger.debug("theme_font_scheme_missing")
        return defaults
    return FontScheme(
        major_font=_typeface(_child(scheme, "majorFont")) or defaults.major_font,
        minor_font=_typeface(_child(scheme, "minorFont")) or defaults.minor_font,
    )


def parse_theme_xml(xml_bytes: bytes) -> ThemeData:
    """Parse theme XML. Raises ET.ParseError on malformed input."""
    root = ET.fromstring(xml_bytes)
    return ThemeData(
        color_scheme=parse_color_scheme(root),
        font_scheme=parse_font_scheme(root),
    )


def extract_theme(container: Container) -> ThemeData:
    """Recover ThemeData from a template; never raises."""
    try:
        xml_bytes = container.get_part(THEME_PART)
        if xml_bytes is None:
            logger.debug("theme_part_missing", part=THEME_PART, template=container.name)
            return DEFAULT_THEME
        theme = parse_theme_xml(xml_bytes)
    except Exception as e:
        logger.warning("theme_extraction_failed", template=container.name, error=str(e))
        return DEFAULT_THEME

    logger.info(
        "theme_extracted",
        template=container.name,
        major_font=theme.font_scheme.major_font,
        minor_font=theme.font_scheme.minor_font,
        accent1=theme.color_scheme.accent1,
    )
    return theme
