import orjson

from deckweave.core.utils.schema_validate import schema_path, validate_instance, validate_json_against_schema


def test_packaged_schemas_exist() -> None:
    assert schema_path("content_model").is_file()
    assert schema_path("template_analysis").is_file()


def test_valid_content_model_file(tmp_path, content_dict) -> None:
    inst = tmp_path / "content.json"
    inst.write_bytes(orjson.dumps(content_dict))

    assert validate_json_against_schema(schema_path("content_model"), inst) == []


def test_missing_and_malformed_files(tmp_path) -> None:
    missing = validate_json_against_schema(schema_path("content_model"), tmp_path / "nope.json")
    assert missing[0].startswith("[ERR] instance not found")

    bad = tmp_path / "bad.json"
    bad.write_text("{oops")
    assert validate_json_against_schema(schema_path("content_model"), bad)[0].startswith("[ERR] invalid JSON")


def test_error_paths_point_at_the_offending_value() -> None:
    errors = validate_instance(
        "content_model",
        {"title": "T", "slides": [{"slideNumber": 1, "title": "S", "content": "c", "layout": 3}]},
    )

    assert errors == ["- $['slides'][0]['layout']: 3 is not of type 'string'"]
