"""Tests for configuration resolution: payload variables and formatters."""

import copy

import pytest

from stepsetup.exceptions import FormatterFailedError, FormatterNotFoundError, UnsupportedValueError
from stepsetup.formatters.registry import FormatterRegistry
from stepsetup.variables.template import TemplateEngine
from stepsetup.variables.values import ValueKind, classify


@pytest.fixture
def engine():
    formatters = FormatterRegistry({
        "ns": {
            "fn": lambda a, b: a + "-" + b,
            "none": lambda: None,
            "count": lambda *args: len(args),
        },
        "str": {"upper": lambda s: s.upper()},
    })
    return TemplateEngine(formatters)


class TestVariableSubstitution:
    """``${name}`` and ``${name|default}`` tokens."""

    def test_numeric_payload_text_decodes_to_number(self, engine):
        assert engine.resolve("${name}", {"name": "42"}) == 42

    def test_default_used_when_payload_missing(self, engine):
        assert engine.resolve("${name|fallback}", {}) == "fallback"

    def test_default_decodes_as_literal(self, engine):
        assert engine.resolve("${name|42}", {}) == 42
        assert engine.resolve("${flag|true}", {}) is True
        assert engine.resolve("${ratio|0.5}", {}) == 0.5
        assert engine.resolve("${nothing|null}", {}) is None

    def test_missing_without_default_becomes_empty_string(self, engine):
        assert engine.resolve("${name}", {}) == ""
        assert engine.resolve("host-${name}", {}) == "host-"

    def test_null_payload_value_falls_back_to_default(self, engine):
        assert engine.resolve("${name|dflt}", {"name": None}) == "dflt"

    def test_substitution_inside_text_stays_string(self, engine):
        assert engine.resolve("prefix-${env}-suffix", {"env": "prod"}) == "prefix-prod-suffix"

    def test_non_text_payload_values_use_text_form(self, engine):
        assert engine.resolve("${flag}", {"flag": True}) is True
        assert engine.resolve("v${n}", {"n": 3}) == "v3"
        assert engine.resolve("${items}", {"items": [1, 2]}) == [1, 2]

    def test_only_rightmost_variable_is_substituted(self, engine):
        result = engine.resolve("${a}-${b}", {"a": "first", "b": "second"})

        assert result == "${a}-second"

    def test_rightmost_token_replaced_even_when_tokens_repeat(self, engine):
        assert engine.resolve("${a}/${a}", {"a": "x"}) == "${a}/x"

    @pytest.mark.parametrize("text", ["NaN", "Infinity", "-Infinity"])
    def test_non_json_constants_stay_text(self, engine, text):
        assert engine.resolve("${x}", {"x": text}) == text

    def test_string_without_tokens_is_unchanged(self, engine):
        assert engine.resolve("plain $ text {with} braces", {}) == "plain $ text {with} braces"
        assert engine.resolve("42", {}) == "42"


class TestFormatterApplication:
    """``%[path]`` and ``%[path:args]`` tokens."""

    def test_formatter_with_arguments(self, engine):
        assert engine.resolve("%[ns.fn:1, 2]", {}) == "1-2"

    def test_formatter_result_spliced_into_text(self, engine):
        assert engine.resolve("id-%[ns.fn:a,b]-end", {}) == "id-a-b-end"

    def test_formatter_without_arguments(self, engine):
        assert engine.resolve("%[ns.count]", {}) == "0"
        assert engine.resolve("%[ns.count:]", {}) == "0"

    def test_formatter_returning_none_leaves_token(self, engine):
        assert engine.resolve("x %[ns.none]", {}) == "x %[ns.none]"

    def test_only_rightmost_formatter_is_applied(self, engine):
        assert engine.resolve("%[str.upper:a] %[str.upper:b]", {}) == "%[str.upper:a] B"

    def test_variable_feeds_formatter(self, engine):
        assert engine.resolve("%[str.upper:${name}]", {"name": "web"}) == "WEB"

    def test_unknown_formatter_raises(self, engine):
        with pytest.raises(FormatterNotFoundError):
            engine.resolve({"a": ["%[ns.missing:1]"]}, {})

    def test_formatter_error_names_the_formatter(self, engine):
        with pytest.raises(FormatterFailedError) as exc_info:
            engine.resolve("%[ns.fn:only-one]", {})

        assert exc_info.value.path == "ns.fn"
        assert isinstance(exc_info.value.__cause__, TypeError)
        assert exc_info.value.exit_code == 1

    def test_decoded_number_skips_formatter_stage(self, engine):
        assert engine.resolve("${port}", {"port": "8080"}) == 8080


class TestStructuralResolution:
    """Containers and scalars."""

    def test_nested_structures_resolved_in_order(self, engine):
        config = {
            "name": "${name}",
            "count": 3,
            "enabled": False,
            "missing": None,
            "tags": ["${tag|a}", {"upper": "%[str.upper:x]"}],
        }

        result = engine.resolve(config, {"name": "svc"})

        assert result == {
            "name": "svc",
            "count": 3,
            "enabled": False,
            "missing": None,
            "tags": ["a", {"upper": "X"}],
        }
        assert list(result.keys()) == ["name", "count", "enabled", "missing", "tags"]

    def test_input_is_not_mutated(self, engine):
        config = {"a": "${x}", "b": ["${y|1}"]}
        original = copy.deepcopy(config)

        first = engine.resolve(config, {"x": "one"})
        second = engine.resolve(config, {"x": "two"})

        assert config == original
        assert first["a"] == "one"
        assert second["a"] == "two"

    def test_unsupported_value_raises(self, engine):
        with pytest.raises(UnsupportedValueError):
            engine.resolve({"when": object()}, {})


@pytest.mark.parametrize("value,kind", [
    (None, ValueKind.NULL),
    (True, ValueKind.BOOLEAN),
    (0, ValueKind.NUMBER),
    (1.5, ValueKind.NUMBER),
    ("s", ValueKind.STRING),
    ([1], ValueKind.SEQUENCE),
    ((1,), ValueKind.SEQUENCE),
    ({}, ValueKind.MAPPING),
])
def test_classify(value, kind):
    assert classify(value) is kind
