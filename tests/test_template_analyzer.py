import re
from pathlib import Path

from deckweave.core.extract.template_analyzer import TemplateAnalyzer, analyze_template
from deckweave.core.models import BASELINE_ANALYSIS
from deckweave.core.utils.schema_validate import validate_instance

from conftest import PNG_1X1, THEME_XML, blank_pptx_bytes, build_zip, replace_part

HEX = re.compile(r"^#[0-9A-F]{6}$")


def test_corrupt_bytes_give_the_baseline(settings) -> None:
    analysis = TemplateAnalyzer(settings).analyze(b"\x00\x01 not a pptx", template_name="bad.pptx")

    assert analysis == BASELINE_ANALYSIS
    assert analysis.slide_count == 12
    assert analysis.image_count == 0
    assert analysis.layout_count == 5
    assert list(analysis.colors) == ["#2563EB", "#64748B", "#10B981", "#F59E0B"]
    assert list(analysis.fonts) == ["Calibri", "Arial"]
    assert analysis.extracted_images == ()


def test_missing_file_gives_the_baseline(settings, tmp_path) -> None:
    assert TemplateAnalyzer(settings).analyze_file(tmp_path / "nope.pptx") == BASELINE_ANALYSIS


def test_themed_document(settings, themed_template) -> None:
    analysis = analyze_template(themed_template, "brand.pptx", settings)

    assert analysis.slide_count == 0
    assert analysis.image_count == 0
    assert analysis.layout_count == len(analysis.master_layouts)
    assert analysis.master_layouts[0] == "Title Slide"
    assert len(analysis.colors) == 12
    assert all(HEX.match(c) for c in analysis.colors)
    assert analysis.colors[4] == "#112233"
    assert list(analysis.fonts) == ["Aptos Display", "Aptos"]
    assert analysis.theme_data.color_scheme.accent1 == "#112233"


def test_images_are_counted_and_written(settings) -> None:
    data = replace_part(blank_pptx_bytes(pictures=1), "ppt/theme/theme1.xml", THEME_XML)
    analysis = TemplateAnalyzer(settings).analyze(data, template_name="pics.pptx")

    assert analysis.slide_count == 1
    assert analysis.image_count == len(analysis.extracted_images) == 1
    image = analysis.extracted_images[0]
    assert image.file_type == "png"
    assert Path(image.file_path).read_bytes() == PNG_1X1


def test_analysis_is_idempotent_apart_from_image_ids(settings) -> None:
    data = build_zip(
        {
            "ppt/theme/theme1.xml": THEME_XML,
            "ppt/media/image1.png": PNG_1X1,
            "ppt/slides/slide1.xml": "<x/>",
        }
    )
    analyzer = TemplateAnalyzer(settings)
    first = analyzer.analyze(data, template_name="t.pptx")
    second = analyzer.analyze(data, template_name="t.pptx")

    assert first.colors == second.colors
    assert first.fonts == second.fonts
    assert first.master_layouts == second.master_layouts
    assert first.theme_data == second.theme_data
    assert (first.slide_count, first.layout_count, first.image_count) == (
        second.slide_count,
        second.layout_count,
        second.image_count,
    )
    assert first.extracted_images[0].id != second.extracted_images[0].id


def test_analysis_serializes_to_schema(settings, themed_template) -> None:
    analysis = TemplateAnalyzer(settings).analyze(themed_template, template_name="brand.pptx")

    assert validate_instance("template_analysis", analysis.to_dict()) == []
    assert validate_instance("template_analysis", BASELINE_ANALYSIS.to_dict()) == []
    assert b'"followedHyperlink"' in analysis.to_json()


def test_single_worker_still_analyzes(settings, themed_template) -> None:
    one = settings.model_copy(update={"analysis_workers": 1})
    analysis = TemplateAnalyzer(one).analyze(themed_template)

    assert analysis.theme_data.font_scheme.major_font == "Aptos Display"
