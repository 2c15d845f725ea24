from __future__ import annotations

import argparse
from functools import lru_cache
from pathlib import Path
from typing import Any

import orjson
from jsonschema import Draft202012Validator

SCHEMAS_DIR = Path(__file__).resolve().parents[1] / "schemas"


def schema_path(name: str) -> Path:
    return SCHEMAS_DIR / f"{name}.schema.json"


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


@lru_cache(maxsize=None)
def _validator(name: str) -> Draft202012Validator:
    return Draft202012Validator(load_json(schema_path(name)))


def _format_errors(v: Draft202012Validator, inst: Any) -> list[str]:
    errors = sorted(v.iter_errors(inst), key=lambda e: list(e.path))
    result: list[str] = []
    for e in errors:
        path = "$"
        for p in e.path:
            path += f"[{p!r}]" if isinstance(p, str) else f"[{p}]"
        result.append(f"- {path}: {e.message}")
    return result


def validate_instance(schema_name: str, instance: Any) -> list[str]:
    """Validate an in-memory instance against a packaged schema.

    `schema_name` is the file stem under core/schemas, e.g. "content_model".
    Returns a list of "- <jsonpath>: <message>" strings (empty if valid).
    """
    return _format_errors(_validator(schema_name), instance)


# Helper function to validate a JSON instance against a schema
def validate_json_against_schema(schema_path: Path, instance_path: Path) -> list[str]:
    """
    Validate a JSON file against a JSON schema file.
    Returns a list of human-readable error strings (empty if valid).
    Each error is formatted as: "- <jsonpath>: <message>"
    """
    if not schema_path.exists():
        return [f"[ERR] schema not found: {schema_path}"]
    if not instance_path.exists():
        return [f"[ERR] instance not found: {instance_path}"]

    schema = load_json(schema_path)
    try:
        inst = load_json(instance_path)
    except orjson.JSONDecodeError as e:
        return [f"[ERR] invalid JSON in {instance_path}: {e}"]

    return _format_errors(Draft202012Validator(schema), inst)


def main() -> int:
    ap = argparse.ArgumentParser(prog="schema_validate")
    ap.add_argument("--schema", required=True, help="schema name (content_model|template_analysis) or path to *.schema.json")
    ap.add_argument("--instance", required=True, help="path to json to validate")
    args = ap.parse_args()

    sp = Path(args.schema)
    if not sp.suffix:
        sp = schema_path(args.schema)
    instance_path = Path(args.instance)

    errors = validate_json_against_schema(sp, instance_path)
    if not errors:
        print(f"[OK] {instance_path} conforms to {sp}")
        return 0
    # If file not found errors, print and return 2
    if errors[0].startswith("[ERR]"):
        print(errors[0])
        return 2
    print(f"[NG] {instance_path} does NOT conform to {sp}")
    for err in errors:
        print(err)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
