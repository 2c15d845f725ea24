import orjson
import pytest

from deckweave.apps.cli.main import main
from deckweave.core.config import get_settings

from conftest import PNG_1X1, THEME_XML, build_zip


@pytest.fixture(autouse=True)
def uploads(tmp_path, monkeypatch):
    monkeypatch.setenv("DECKWEAVE_UPLOADS_DIR", str(tmp_path / "uploads"))
    get_settings.cache_clear()
    yield tmp_path / "uploads"
    get_settings.cache_clear()


def _run(argv) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_paths(capsys, uploads) -> None:
    assert _run(["paths"]) == 0
    out = capsys.readouterr().out
    assert f"uploads_dir: {uploads}" in out
    assert "schema.content_model:" in out


def test_analyze_writes_json(tmp_path, capsys) -> None:
    template = tmp_path / "brand.pptx"
    template.write_bytes(build_zip({"ppt/theme/theme1.xml": THEME_XML, "ppt/media/image1.png": PNG_1X1}))
    out = tmp_path / "out" / "analysis.json"

    assert _run(["analyze", str(template), "--out", str(out)]) == 0
    data = orjson.loads(out.read_bytes())
    assert data["imageCount"] == 1
    assert data["themeData"]["colorScheme"]["accent1"] == "#112233"
    assert "[OK]" in capsys.readouterr().out


def test_analyze_missing_template(tmp_path, capsys) -> None:
    assert _run(["analyze", str(tmp_path / "missing.pptx")]) == 2
    assert "[NG]" in capsys.readouterr().out


def test_validate(tmp_path, capsys, content_dict) -> None:
    good = tmp_path / "good.json"
    good.write_bytes(orjson.dumps(content_dict))
    bad = tmp_path / "bad.json"
    bad.write_bytes(orjson.dumps({"slides": []}))

    assert _run(["validate", str(good)]) == 0
    assert _run(["validate", str(bad)]) == 2
    assert "'title' is a required property" in capsys.readouterr().out


def test_generate_and_cleanup_images(tmp_path, capsys, content_dict, uploads) -> None:
    content = tmp_path / "content.json"
    content.write_bytes(orjson.dumps(content_dict))
    template = tmp_path / "brand.pptx"
    template.write_bytes(build_zip({"ppt/theme/theme1.xml": THEME_XML, "ppt/media/image1.png": PNG_1X1}))

    assert _run(["generate", str(content), "--template", str(template), "--notes", "none"]) == 0
    assert "[OK] generated:" in capsys.readouterr().out
    assert len(list(uploads.glob("*.pptx"))) == 1

    extracted = list((uploads / "extracted_images").iterdir())
    assert len(extracted) == 1
    image_id = extracted[0].name.split("_", 1)[0]

    assert _run(["cleanup-images", image_id]) == 0
    assert "removed 1" in capsys.readouterr().out
    assert not extracted[0].exists()


def test_generate_rejects_invalid_content(tmp_path, capsys) -> None:
    content = tmp_path / "content.json"
    content.write_bytes(b"{broken")

    assert _run(["generate", str(content)]) == 2
    assert "[NG]" in capsys.readouterr().out
