"""Tests for the schema compiler's well-formedness pass."""

import re

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from link_validator import compile
from link_validator.config import Settings
from link_validator.schema import (
    CompileError,
    CompileErrorCode,
    OriginFormat,
    SchemaNode,
    SchemaType,
    compile_schema,
)


def compile_node(node: SchemaNode, strict_required: bool = False):
    return compile_schema(node, OriginFormat.CANONICAL_SCHEMA, strict_required=strict_required)


class TestRanges:
    """Low bounds must not exceed high bounds."""

    @pytest.mark.parametrize("node", [
        SchemaNode(type=SchemaType.NUMBER, minimum=5, maximum=1),
        SchemaNode(type=SchemaType.STRING, min_length=5, max_length=1),
        SchemaNode(type=SchemaType.ARRAY, min_items=3, max_items=2),
    ])
    def test_inverted_range(self, node: SchemaNode) -> None:
        with pytest.raises(CompileError) as exc_info:
            compile_node(node)
        assert exc_info.value.code == CompileErrorCode.INVALID_RANGE

    def test_equal_bounds_are_fine(self) -> None:
        compile_node(SchemaNode(type=SchemaType.STRING, min_length=4, max_length=4))

    def test_inverted_rule_range(self) -> None:
        """min > max in rule syntax fails at compile time, not at conversion."""
        with pytest.raises(CompileError) as exc_info:
            compile({"age": {"type": "integer", "min": 10, "max": 1}})
        assert exc_info.value.code == CompileErrorCode.INVALID_RANGE
        assert exc_info.value.path == ("age",)


class TestBounds:
    """Counts are non-negative integers and multipleOf is positive."""

    @pytest.mark.parametrize("node", [
        SchemaNode(type=SchemaType.STRING, min_length=-1),
        SchemaNode(type=SchemaType.STRING, max_length=2.5),
        SchemaNode(type=SchemaType.ARRAY, min_items=-3),
        SchemaNode(type=SchemaType.NUMBER, multiple_of=0),
        SchemaNode(type=SchemaType.NUMBER, multiple_of=-2),
    ])
    def test_invalid_bound(self, node: SchemaNode) -> None:
        with pytest.raises(CompileError) as exc_info:
            compile_node(node)
        assert exc_info.value.code == CompileErrorCode.INVALID_BOUND

    def test_integral_float_count(self) -> None:
        compile_node(SchemaNode(type=SchemaType.STRING, min_length=3.0))


class TestPatterns:
    """Regexes are compiled once, up front."""

    def test_invalid_pattern(self) -> None:
        with pytest.raises(CompileError) as exc_info:
            compile_node(SchemaNode(type=SchemaType.STRING, pattern="("))
        assert exc_info.value.code == CompileErrorCode.INVALID_PATTERN

    def test_patterns_are_collected(self) -> None:
        compiled = compile({"color": {"type": "hex"}}).compiled
        assert compiled.patterns["^[0-9a-fA-F]+$"].search("ff")


class TestTypeConstraints:
    """Typed nodes carry only keywords that apply to their type."""

    @pytest.mark.parametrize("node", [
        SchemaNode(type=SchemaType.NUMBER, min_length=3),
        SchemaNode(type=SchemaType.STRING, minimum=0),
        SchemaNode(type=SchemaType.BOOLEAN, max_items=1),
        SchemaNode(type=SchemaType.ARRAY, properties={"a": SchemaNode()}),
    ])
    def test_mismatch(self, node: SchemaNode) -> None:
        with pytest.raises(CompileError) as exc_info:
            compile_node(node)
        assert exc_info.value.code == CompileErrorCode.TYPE_CONSTRAINT_MISMATCH

    def test_untyped_node_may_carry_anything(self) -> None:
        compile_node(SchemaNode(min_length=1, minimum=0, min_items=1))

    def test_nested_error_path(self) -> None:
        node = SchemaNode(
            type=SchemaType.OBJECT,
            properties={"a": SchemaNode(type=SchemaType.ARRAY, items=SchemaNode(type=SchemaType.NUMBER, min_length=1))},
        )
        with pytest.raises(CompileError) as exc_info:
            compile_node(node)
        assert exc_info.value.path == ("a", "items")


class TestRequiredNames:
    """Required names that are not declared as properties."""

    node = SchemaNode(type=SchemaType.OBJECT, properties={"a": SchemaNode()}, required=("a", "b"))

    def test_tolerated_by_default(self) -> None:
        with capture_logs() as logs:
            compiled = compile_node(self.node)
        assert compiled.root.required == ("a", "b")
        assert any(log["event"] == "required_not_in_properties" and log["name"] == "b" for log in logs)

    def test_rejected_when_strict(self) -> None:
        with pytest.raises(CompileError) as exc_info:
            compile_node(self.node, strict_required=True)
        assert exc_info.value.code == CompileErrorCode.UNKNOWN_REQUIRED

    def test_strict_from_settings(self) -> None:
        schema = {"type": "object", "properties": {}, "required": ["b"]}
        with pytest.raises(CompileError):
            compile(schema, settings=Settings(STRICT_REQUIRED=True))


class TestCompiledSchema:
    """The compiled artifact is frozen and detached from its input."""

    def test_origin_is_recorded(self) -> None:
        compiled = compile_schema(SchemaNode(), OriginFormat.RULE_SYNTAX)
        assert compiled.origin == OriginFormat.RULE_SYNTAX

    def test_properties_are_read_only(self) -> None:
        validator = compile({"type": "object", "properties": {"a": {"type": "string"}}})
        properties = validator.compiled.root.properties
        with pytest.raises(TypeError):
            properties["b"] = properties["a"]
        assert list(validator.compiled.root.properties) == ["a"]

    def test_source_mapping_is_detached(self) -> None:
        properties = {"a": SchemaNode(type=SchemaType.STRING)}
        compiled = compile_node(SchemaNode(type=SchemaType.OBJECT, properties=properties))
        properties["b"] = SchemaNode()
        assert list(compiled.root.properties) == ["a"]

    def test_patterns_are_read_only(self) -> None:
        compiled = compile({"color": {"type": "hex"}}).compiled
        with pytest.raises(TypeError):
            compiled.patterns["^x$"] = re.compile("^x$")
        assert list(compiled.patterns) == ["^[0-9a-fA-F]+$"]

    def test_enum_candidates_are_detached(self) -> None:
        candidate = {"a": [1]}
        validator = compile({"type": "object", "enum": [candidate]})
        candidate["a"].append(2)
        assert validator.validate({"a": [1]}).is_valid

    def test_root_is_frozen(self) -> None:
        compiled = compile_node(SchemaNode(type=SchemaType.STRING))
        with pytest.raises(ValidationError):
            compiled.root.type = SchemaType.NUMBER

    def test_deterministic(self, user_json_schema: dict) -> None:
        assert compile(user_json_schema).compiled == compile(user_json_schema).compiled

    def test_to_json_schema(self, user_rules: dict) -> None:
        assert compile(user_rules).to_json_schema() == {
            "type": "object",
            "properties": {
                "username": {"type": "string", "minLength": 3},
                "email": {"type": "string", "format": "email"},
            },
            "required": ["username", "email"],
        }
