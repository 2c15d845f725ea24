from deckweave.core.extract.template_analyzer import analyze_template
from deckweave.core.models import BASELINE_ANALYSIS
from deckweave.core.render.style import DEFAULT_STYLE, resolve_style


def test_no_template_uses_default_style() -> None:
    style = resolve_style(None)

    assert style is DEFAULT_STYLE
    assert style.title_color == "2563EB"
    assert style.text_color == "1F2937"
    assert style.accent_color == "64748B"
    assert style.title_font == "Calibri"
    assert style.body_font == "Calibri"
    assert style.background_color == "FFFFFF"


def test_template_theme_maps_onto_style(settings, themed_template) -> None:
    style = resolve_style(analyze_template(themed_template, "brand.pptx", settings))

    assert style.title_color == "112233"  # accent1
    assert style.text_color == "111111"  # text1
    assert style.accent_color == "445566"  # accent2
    assert style.title_font == "Aptos Display"
    assert style.body_font == "Aptos"
    assert style.background_color == "FAFAFA"


def test_baseline_analysis_maps_without_hash() -> None:
    style = resolve_style(BASELINE_ANALYSIS)

    assert style.title_color == "2563EB"
    assert style.text_color == "000000"
    assert style.accent_color == "64748B"
    assert not any(v.startswith("#") for v in (style.title_color, style.text_color, style.accent_color))
