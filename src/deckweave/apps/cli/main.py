from __future__ import annotations

import argparse
from pathlib import Path

import orjson

from deckweave.core.config import get_settings
from deckweave.core.errors import ContentModelError, GenerationFailure
from deckweave.core.extract.media_extractor import MediaExtractor
from deckweave.core.extract.template_analyzer import TemplateAnalyzer
from deckweave.core.logging import configure_logging
from deckweave.core.models import NOTES_MODES, GenerationOptions, PresentationContent
from deckweave.core.render.pptx_writer import PresentationWriter
from deckweave.core.utils.schema_validate import SCHEMAS_DIR, schema_path, validate_json_against_schema


def _print_errors(errors: list[str], limit: int = 30) -> None:
    for m in errors[:limit]:
        print(f"  {m}")
    if len(errors) > limit:
        print(f"  ... ({len(errors)} errors)")


def _load_content(path: Path) -> PresentationContent:
    return PresentationContent.from_json(path.read_bytes())


def cmd_paths(_: argparse.Namespace) -> int:
    settings = get_settings()
    print(f"uploads_dir: {settings.uploads_dir}")
    print(f"images_dir: {settings.images_dir}")
    print(f"schemas_dir: {SCHEMAS_DIR}")
    for name in ("content_model", "template_analysis"):
        print(f"schema.{name}: {schema_path(name)}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    in_path = Path(args.template).resolve()
    if not in_path.exists():
        print(f"[NG] template not found: {in_path}")
        return 2

    analysis = TemplateAnalyzer(get_settings()).analyze_file(in_path)
    data = analysis.to_json()

    if args.out:
        out_path = Path(args.out).resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(data)
        print(f"[OK] analysis written: {out_path}")
    else:
        print(data.decode("utf-8"))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    in_path = Path(args.content).resolve()
    errors = validate_json_against_schema(schema_path("content_model"), in_path)
    if not errors:
        print(f"[OK] {in_path}")
        return 0
    if errors[0].startswith("[ERR]"):
        print(errors[0])
        return 2
    print(f"[NG] {in_path} does NOT conform to content_model schema")
    _print_errors(errors)
    return 2


def cmd_generate(args: argparse.Namespace) -> int:
    in_path = Path(args.content).resolve()
    if not in_path.exists():
        print(f"[NG] content model not found: {in_path}")
        return 2

    template = Path(args.template).resolve() if args.template else None
    if template is not None and not template.exists():
        print(f"[NG] template not found: {template}")
        return 2

    try:
        content = _load_content(in_path)
    except ContentModelError as e:
        print(f"[NG] {e.message}")
        _print_errors([str(x) for x in e.details.get("errors", [])] or [str(e.details.get("detail", ""))])
        return 2

    options = GenerationOptions(
        generate_notes=args.notes,
        reuse_images=not args.no_reuse_images,
        preserve_layouts=not args.no_preserve_layouts,
        match_fonts=not args.no_match_fonts,
    )

    try:
        out_path = PresentationWriter(get_settings()).generate(content, template_path=template, options=options)
    except GenerationFailure as e:
        print("[NG] generate failed")
        print(f"      detail: {orjson.dumps(e.to_dict()).decode('utf-8')}")
        return 2

    print(f"[OK] generated: {out_path}")
    return 0


def cmd_cleanup_images(args: argparse.Namespace) -> int:
    removed = MediaExtractor(get_settings().images_dir).cleanup(args.ids)
    print(f"[OK] removed {removed} extracted image(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="deckweave")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_paths = sub.add_parser("paths", help="show configured directories and schema paths")
    p_paths.set_defaults(func=cmd_paths)

    p_an = sub.add_parser("analyze", help="analyze a .pptx/.potx template (theme, layouts, media)")
    p_an.add_argument("template", help="path to template file")
    p_an.add_argument("--out", required=False, help="write analysis JSON here instead of stdout")
    p_an.set_defaults(func=cmd_analyze)

    p_val = sub.add_parser("validate", help="validate a content model JSON file")
    p_val.add_argument("content", help="path to content model JSON")
    p_val.set_defaults(func=cmd_validate)

    p_gen = sub.add_parser("generate", help="generate a .pptx from a content model")
    p_gen.add_argument("content", help="path to content model JSON")
    p_gen.add_argument("--template", required=False, help="optional .pptx template to take styling from")
    p_gen.add_argument("--notes", choices=NOTES_MODES, default="auto", help="speaker notes mode ('none' drops notes)")
    p_gen.add_argument("--no-reuse-images", action="store_true", help="reserved; image reuse is always attempted")
    p_gen.add_argument("--no-preserve-layouts", action="store_true", help="reserved; accepted for compatibility")
    p_gen.add_argument("--no-match-fonts", action="store_true", help="reserved; accepted for compatibility")
    p_gen.set_defaults(func=cmd_generate)

    p_clean = sub.add_parser("cleanup-images", help="delete extracted template images by id")
    p_clean.add_argument("ids", nargs="+", help="image ids from a previous analysis")
    p_clean.set_defaults(func=cmd_cleanup_images)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)
    settings.ensure_dirs()
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
