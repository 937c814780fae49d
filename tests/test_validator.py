"""End-to-end tests for the public compile/validate API."""

import pytest

from link_validator import (
    CompileError,
    CompileErrorCode,
    OriginFormat,
    Validator,
    compile,
    normalize,
    parse_json_schema,
    validate,
)
from link_validator.config import Settings


class TestRuleSyntax:
    """Rule-syntax schemas report errors keyed by ``field``."""

    def test_min_length(self) -> None:
        schema = {"username": {"type": "string", "required": True, "min": 3}}
        result = validate(schema, {"username": "jo"})
        assert result.is_valid is False
        assert result.render() == [{"message": '"jo" is shorter than 3 characters', "field": "username"}]

    def test_missing_required_email(self) -> None:
        result = validate({"email": {"type": "email", "required": True}}, {})
        assert result.render() == [{"message": '"email" is a required property', "field": "email"}]

    def test_nested_minimum(self, nested_rules: dict) -> None:
        data = {"user": {"profile": {"personal": {"name": "John", "age": -5}}}}
        result = validate(nested_rules, data)
        assert result.render() == [
            {"message": "-5 is less than the minimum of 0", "field": "user/profile/personal/age"},
        ]

    def test_nested_valid(self, nested_rules: dict) -> None:
        data = {"user": {"profile": {"personal": {"name": "John", "age": 30}}}}
        assert validate(nested_rules, data).is_valid

    def test_hex(self) -> None:
        result = validate({"color": {"type": "hex"}}, {"color": "zz"})
        assert result.render() == [{"message": '"zz" does not match "^[0-9a-fA-F]+$"', "field": "color"}]
        assert validate({"color": {"type": "hex"}}, {"color": "ff00AA"}).is_valid

    def test_basic_user(self, user_rules: dict) -> None:
        assert validate(user_rules, {"username": "john_doe", "email": "john@example.com"}).is_valid

    def test_all_errors_are_reported(self, user_rules: dict) -> None:
        result = validate(user_rules, {"username": "jo", "email": "invalid-email"})
        assert result.render() == [
            {"message": '"jo" is shorter than 3 characters', "field": "username"},
            {"message": '"invalid-email" is not a "email"', "field": "email"},
        ]

    def test_array_rule_list(self) -> None:
        schema = {
            "tags": [{"type": "array", "required": True}, {"min": 1, "max": 5}],
            "categories": {"type": "array", "required": True, "len": 2},
        }
        assert validate(schema, {"tags": ["rust", "web"], "categories": ["tech", "programming"]}).is_valid
        result = validate(schema, {"tags": [], "categories": ["tech"]})
        assert [e["field"] for e in result.render()] == ["tags", "categories"]

    def test_special_types(self) -> None:
        schema = {
            "email": {"type": "email", "required": True},
            "website": {"type": "url"},
            "created_at": {"type": "date"},
        }
        data = {"email": "test@example.com", "website": "https://example.com", "created_at": "2023-01-01T00:00:00Z"}
        assert validate(schema, data).is_valid

    def test_enum(self) -> None:
        schema = {"status": {"type": "string", "enum": ["active", "inactive", "pending"]}}
        assert validate(schema, {"status": "active"}).is_valid
        assert not validate(schema, {"status": "deleted"}).is_valid

    def test_nested_array_fields(self) -> None:
        schema = {
            "users": {
                "type": "array",
                "required": True,
                "fields": {
                    "user_item": {
                        "type": "object",
                        "fields": {
                            "name": {"type": "string", "required": True},
                            "email": {"type": "email", "required": True},
                        },
                    }
                },
            }
        }
        data = {"users": [{"user_item": {"name": "John", "email": "john@example.com"}}]}
        assert validate(schema, data).is_valid

        result = validate(schema, {"users": [{"user_item": {"name": "John"}}]})
        assert result.render() == [{"message": '"email" is a required property', "field": "users/0/user_item/email"}]

    def test_unknown_keyword_warns_but_still_validates(self) -> None:
        schema = {"age": {"type": "integer", "minimum": 0}}
        warnings = []
        validator = compile(schema, on_warning=warnings.append)
        assert [w.message for w in warnings] == ["unsupported rule 'minimum'"]
        assert validator.validate({"age": -1}).is_valid


class TestJsonSchema:
    """JSON Schema documents report errors keyed by ``instancePath``."""

    def test_errors(self, user_json_schema: dict) -> None:
        result = validate(user_json_schema, {"username": "jo", "email": "invalid-email"})
        assert result.render() == [
            {"message": '"jo" is shorter than 3 characters', "instancePath": "username"},
            {"message": '"invalid-email" is not a "email"', "instancePath": "email"},
        ]

    def test_valid(self, user_json_schema: dict) -> None:
        assert validate(user_json_schema, {"username": "john_doe", "email": "john@example.com"}).is_valid

    def test_root_error_has_empty_path(self) -> None:
        assert validate({"type": "string"}, 5).render() == [
            {"message": '5 is not of type "string"', "instancePath": ""},
        ]

    @pytest.mark.parametrize("schema", ["invalid schema", 42])
    def test_non_object_schema(self, schema) -> None:
        with pytest.raises(CompileError) as exc_info:
            compile(schema)
        assert exc_info.value.code == CompileErrorCode.MALFORMED_SCHEMA


class TestCompile:
    """Compile once, validate many times."""

    def test_origin(self, user_rules: dict, user_json_schema: dict) -> None:
        assert compile(user_rules).origin == OriginFormat.RULE_SYNTAX
        assert compile(user_json_schema).origin == OriginFormat.CANONICAL_SCHEMA

    def test_reuse(self, user_rules: dict) -> None:
        validator = compile(user_rules)
        assert isinstance(validator, Validator)
        assert not validator.validate({}).is_valid
        assert validator.validate({"username": "john", "email": "john@example.com"}).is_valid
        assert repr(validator) == "Validator(origin='rule_syntax')"

    def test_ambiguous_default_from_settings(self) -> None:
        schema = {"status": {"type": "string"}}
        validator = compile(schema, settings=Settings(AMBIGUOUS_FORMAT="canonical_schema"))
        assert validator.origin == OriginFormat.CANONICAL_SCHEMA

    def test_assert_formats_from_settings(self) -> None:
        validator = compile({"email": {"type": "email"}}, settings=Settings(ASSERT_FORMATS=False))
        assert validator.validate({"email": "invalid-email"}).is_valid

    def test_schema_is_not_mutated(self, nested_rules: dict) -> None:
        before = repr(nested_rules)
        compile(nested_rules)
        assert repr(nested_rules) == before

    def test_to_dict(self, user_rules: dict) -> None:
        result = compile(user_rules).validate({"username": "john", "email": "john@example.com"})
        assert result.to_dict() == {"is_valid": True, "errors": []}


class TestCanonicalRoundTrip:
    """Rule syntax and its canonical rendering compile to the same tree."""

    @pytest.mark.parametrize("schema", [
        {"username": {"type": "string", "required": True, "min": 3}},
        {"color": {"type": "hex", "message": "bad color"}},
        {"cb": {"type": "method"}},
        {"tags": {"type": "array", "defaultField": {"type": "integer", "max": 9}}},
    ])
    def test_rules_to_canonical(self, schema: dict) -> None:
        root, _ = normalize(schema)
        canonical = compile(root.to_json_schema())
        assert canonical.origin == OriginFormat.CANONICAL_SCHEMA
        assert canonical.compiled.root == root

    def test_canonical_is_stable(self, user_json_schema: dict) -> None:
        first = compile(user_json_schema)
        second = compile(first.to_json_schema())
        assert second.compiled.root == first.compiled.root == parse_json_schema(user_json_schema)
