import base64
import io
import zipfile

import pytest
from pptx import Presentation
from pptx.util import Inches

from deckweave.core.config import Settings

# 1x1 RGBA PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

THEME_XML = """<?xml version="1.0" encoding="UTF-8"?>
<a:theme xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" name="Custom Theme">
  <a:themeElements>
    <a:clrScheme name="Custom Colors">
      <a:dk1><a:sysClr val="windowText" lastClr="111111"/></a:dk1>
      <a:lt1><a:sysClr val="window" lastClr="FAFAFA"/></a:lt1>
      <a:dk2><a:srgbClr val="222222"/></a:dk2>
      <a:lt2><a:srgbClr val="EEEEEE"/></a:lt2>
      <a:accent1><a:srgbClr val="112233"/></a:accent1>
      <a:accent2><a:srgbClr val="445566"/></a:accent2>
      <a:accent3><a:srgbClr val="778899"/></a:accent3>
      <a:accent4><a:srgbClr val="AABBCC"/></a:accent4>
      <a:accent5><a:srgbClr val="DDEEFF"/></a:accent5>
      <a:accent6><a:srgbClr val="123456"/></a:accent6>
      <a:hlink><a:srgbClr val="0000FF"/></a:hlink>
      <a:folHlink><a:srgbClr val="800080"/></a:folHlink>
    </a:clrScheme>
    <a:fontScheme name="Custom Fonts">
      <a:majorFont><a:latin typeface="Aptos Display"/></a:majorFont>
      <a:minorFont><a:latin typeface="Aptos"/></a:minorFont>
    </a:fontScheme>
  </a:themeElements>
</a:theme>
"""


def build_zip(parts: dict) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in parts.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def replace_part(pptx_bytes: bytes, name: str, data) -> bytes:
    """Copy a zip, swapping (or adding) one part."""
    parts = {}
    with zipfile.ZipFile(io.BytesIO(pptx_bytes)) as src:
        for info in src.infolist():
            parts[info.filename] = src.read(info.filename)
    parts[name] = data
    return build_zip(parts)


def blank_pptx_bytes(pictures: int = 0) -> bytes:
    """A real python-pptx document; each picture lands on its own slide."""
    prs = Presentation()
    for _ in range(pictures):
        slide = prs.slides.add_slide(prs.slide_layouts[6])
        slide.shapes.add_picture(io.BytesIO(PNG_1X1), Inches(1), Inches(1))
    buf = io.BytesIO()
    prs.save(buf)
    return buf.getvalue()


@pytest.fixture
def settings(tmp_path):
    return Settings(uploads_dir=tmp_path / "uploads", analysis_workers=3)


@pytest.fixture
def themed_template() -> bytes:
    return replace_part(blank_pptx_bytes(), "ppt/theme/theme1.xml", THEME_XML)


@pytest.fixture
def content_dict():
    return {
        "title": "Quarterly Review: Q3/2024",
        "slides": [
            {"slideNumber": 1, "title": "Quarterly Review", "content": "Q3 2024", "layout": "title_slide"},
            {
                "slideNumber": 2,
                "title": "Highlights",
                "content": "Revenue up\nCosts down",
                "layout": "content",
                "speakerNotes": "Mention the hiring freeze.",
            },
            {"slideNumber": 3, "title": "Compare", "content": "A\n\nB\n\nC\n\nD", "layout": "two_column"},
            {"slideNumber": 4, "title": "Product", "content": "New launch", "layout": "image_content", "imagePrompt": "a rocket"},
            {"slideNumber": 5, "title": "Thanks", "content": "Questions?", "layout": "conclusion", "speakerNotes": None},
        ],
        "totalSlides": 5,
        "estimatedDuration": "10 minutes",
    }
