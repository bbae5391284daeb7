import json
import threading

import pytest
import yaml

from testsuites.contract_testing.framework.schema_model import (
    MalformedSchema,
    ObjectSchema,
    SchemaNotFound,
)
from testsuites.contract_testing.framework.schema_registry import (
    SchemaRegistry,
    schema_name_for,
)


USER_SCHEMA = {
    "type": "object",
    "required": ["id"],
    "properties": {"id": {"type": "number"}, "name": {"type": "string"}},
}


def test_add_and_get():
    registry = SchemaRegistry()
    parsed = registry.add_schema("user", USER_SCHEMA)

    assert isinstance(parsed, ObjectSchema)
    assert registry.get("user") is parsed
    assert "user" in registry
    assert len(registry) == 1
    assert registry.names() == ["user"]


def test_unknown_name_raises():
    registry = SchemaRegistry()
    with pytest.raises(SchemaNotFound) as exc_info:
        registry.get("missing")
    assert exc_info.value.name == "missing"


def test_registries_are_independent():
    first = SchemaRegistry({"user": USER_SCHEMA})
    second = SchemaRegistry()

    assert "user" in first
    assert "user" not in second


def test_re_registering_replaces_schema():
    registry = SchemaRegistry({"thing": {"type": "string"}})
    registry.add_schema("thing", {"type": "number"})

    assert registry.get("thing").type == "number"
    assert len(registry) == 1


def test_malformed_schema_is_not_registered():
    registry = SchemaRegistry()
    with pytest.raises(MalformedSchema):
        registry.add_schema("bad", {"type": "object", "required": ["x"], "properties": {}})
    assert "bad" not in registry


def test_empty_name_is_rejected():
    with pytest.raises(ValueError):
        SchemaRegistry().add_schema("", {"type": "string"})


def test_schemas_returns_snapshot():
    registry = SchemaRegistry({"user": USER_SCHEMA})
    snapshot = registry.schemas()
    registry.add_schema("other", {"type": "null"})

    assert list(snapshot) == ["user"]
    assert snapshot["user"].to_dict() == USER_SCHEMA


def test_load_directory_reads_json_and_yaml(tmp_path):
    (tmp_path / "user.schema.json").write_text(json.dumps(USER_SCHEMA), encoding="utf-8")
    (tmp_path / "status.yaml").write_text(
        yaml.dump({"type": "string", "enum": ["on", "off"]}), encoding="utf-8"
    )
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    registry = SchemaRegistry()
    loaded = registry.load_directory(tmp_path)

    assert loaded == ["status", "user"]
    assert registry.get("status").enum == ("on", "off")


def test_load_file_with_explicit_name(tmp_path):
    path = tmp_path / "user.schema.json"
    path.write_text(json.dumps(USER_SCHEMA), encoding="utf-8")

    registry = SchemaRegistry()
    registry.load_file(path, name="account")

    assert registry.names() == ["account"]


def test_load_file_invalid_document(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(MalformedSchema, match="Invalid schema document broken.json"):
        SchemaRegistry().load_file(path)


def test_load_directory_missing(tmp_path):
    with pytest.raises(SchemaNotFound):
        SchemaRegistry().load_directory(tmp_path / "absent")


def test_schema_name_for(tmp_path):
    assert schema_name_for(tmp_path / "user.schema.json") == "user"
    assert schema_name_for(tmp_path / "employee.yml") == "employee"


def test_concurrent_registration():
    registry = SchemaRegistry()

    def register(index):
        registry.add_schema(f"schema_{index}", {"type": "integer", "minimum": index})

    threads = [threading.Thread(target=register, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 20
    assert registry.get("schema_7").minimum == 7


def test_bundled_schemas_load(schemas_root):
    registry = SchemaRegistry()
    assert registry.load_directory(schemas_root) == ["employee", "user"]
    assert registry.get("user").required == ("id", "username", "email")
