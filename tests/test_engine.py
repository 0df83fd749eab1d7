"""Tests for the reference rule engine and built-in rules."""

from datetime import date

import pytest

from validator_assistant.engine import (
    FieldError,
    RuleEngine,
    RuleToken,
    ValidationOutcome,
    parse_rule_string,
)
from validator_assistant.errors import RuleConfigurationError, UnknownRuleError
from validator_assistant.rules import (
    EMAIL_PATTERN,
    URL_PATTERN,
    UUID_PATTERN,
    RuleRegistry,
    rule,
)


pytestmark = pytest.mark.usefixtures("builtin_rules")


class MockStore:
    """In-memory store for the unique rule."""

    def __init__(self, rows: dict[tuple[str, str], set]):
        self.rows = rows
        self.lookups: list[tuple[str, str, object]] = []

    def exists(self, table, column, value):
        self.lookups.append((table, column, value))
        return value in self.rows.get((table, column), set())


def check(rules: dict[str, str], inputs: dict, messages: dict | None = None, store=None):
    return RuleEngine(store=store).evaluate(inputs, rules, messages or {})


def passes(rule_string: str, value, **inputs) -> bool:
    outcome = check({"field": rule_string}, {"field": value, **inputs})
    return not outcome.has_failures()


# =============================================================================
# Parsing
# =============================================================================


class TestParseRuleString:
    def test_simple_tokens(self):
        assert parse_rule_string("required|email") == [
            RuleToken("required"),
            RuleToken("email"),
        ]

    def test_params(self):
        assert parse_rule_string("between:1, 10") == [RuleToken("between", ["1", "10"])]

    def test_regex_keeps_commas_and_colons(self):
        assert parse_rule_string("regex:^a{1,3}:b$") == [RuleToken("regex", ["^a{1,3}:b$"])]

    def test_ignores_empty_segments(self):
        assert parse_rule_string("required||email|") == [
            RuleToken("required"),
            RuleToken("email"),
        ]

    def test_empty_string(self):
        assert parse_rule_string("") == []


# =============================================================================
# Patterns
# =============================================================================


class TestPatterns:
    def test_email_valid(self):
        for email in ["test@example.com", "user.name@domain.co.uk", "user+tag@example.org"]:
            assert EMAIL_PATTERN.match(email), f"{email} should be valid"

    def test_email_invalid(self):
        for email in ["not-an-email", "@example.com", "user@", "user name@example.com"]:
            assert not EMAIL_PATTERN.match(email), f"{email} should be invalid"

    def test_url(self):
        assert URL_PATTERN.match("https://example.com/path?q=1")
        assert not URL_PATTERN.match("ftp://example.com")

    def test_uuid(self):
        assert UUID_PATTERN.match("550e8400-e29b-41d4-a716-446655440000")
        assert not UUID_PATTERN.match("550e8400-e29b-41d4-a716")


# =============================================================================
# Built-in Rules
# =============================================================================


class TestRequired:
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_empty_values_fail(self, value):
        assert not passes("required", value)

    @pytest.mark.parametrize("value", ["x", 0, False, ["a"]])
    def test_present_values_pass(self, value):
        assert passes("required", value)

    def test_missing_input_fails(self):
        outcome = check({"username": "required"}, {})
        assert outcome.failed_fields() == ["username"]


class TestOptionalFields:
    @pytest.mark.parametrize("rule_string", ["email", "numeric|min:3", "nullable|url", "in:a,b"])
    def test_empty_value_skips_non_required_rules(self, rule_string):
        assert passes(rule_string, "")
        assert passes(rule_string, None)


class TestTypes:
    def test_numeric(self):
        assert passes("numeric", "12.5")
        assert passes("numeric", 7)
        assert not passes("numeric", "abc")
        assert not passes("numeric", True)

    def test_integer(self):
        assert passes("integer", "-12")
        assert passes("integer", 3)
        assert not passes("integer", "1.5")
        assert not passes("integer", 1.5)

    def test_string(self):
        assert passes("string", "x")
        assert not passes("string", 5)

    def test_boolean(self):
        for value in [True, False, 0, 1, "0", "1", "true", "false"]:
            assert passes("boolean", value), value
        assert not passes("boolean", "yes")

    def test_alpha_and_alpha_num(self):
        assert passes("alpha", "abc")
        assert not passes("alpha", "abc1")
        assert passes("alpha_num", "abc1")
        assert not passes("alpha_num", "abc-1")

    def test_date(self):
        assert passes("date", "2024-02-29")
        assert passes("date", date(2024, 1, 1))
        assert not passes("date", "2023-02-29")
        assert not passes("date", "01/02/2024")


class TestSize:
    def test_numeric_min_compares_value(self):
        assert passes("numeric|min:13", "13")
        assert not passes("numeric|min:13", "12")

    def test_string_min_compares_length(self):
        assert passes("min:3", "abc")
        assert not passes("min:3", "ab")

    def test_max(self):
        assert passes("max:2", ["a", "b"])
        assert not passes("max:2", ["a", "b", "c"])
        assert not passes("integer|max:10", 11)

    def test_between(self):
        assert passes("numeric|between:1,10", 5)
        assert not passes("numeric|between:1,10", 11)

    def test_non_numeric_param_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            check({"f": "min:many"}, {"f": "abc"})

    def test_missing_param_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            check({"f": "between:1"}, {"f": 3})


class TestMembershipAndComparison:
    def test_in(self):
        assert passes("in:red,green", "red")
        assert not passes("in:red,green", "blue")
        assert passes("in:1,2", 2)
        assert not passes("in:a,b", ["a", "c"])

    def test_not_in(self):
        assert passes("not_in:admin,root", "ada")
        assert not passes("not_in:admin,root", "root")

    def test_same(self):
        assert passes("same:other", "x", other="x")
        assert not passes("same:other", "x", other="y")

    def test_confirmed(self):
        assert passes("confirmed", "secret", field_confirmation="secret")
        assert not passes("confirmed", "secret", field_confirmation="other")

    def test_regex(self):
        assert passes("regex:^[A-Z]{2}\\d+$", "AB12")
        assert not passes("regex:^[A-Z]{2}\\d+$", "ab12")

    def test_invalid_regex_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            check({"f": "regex:[unclosed"}, {"f": "x"})


class TestUnique:
    def test_taken_value_fails(self):
        store = MockStore({("users", "email"): {"ada@example.com"}})
        outcome = check({"email": "unique:users,email"}, {"email": "ada@example.com"}, store=store)
        assert outcome.first("email") == "The email has already been taken."

    def test_free_value_passes(self):
        store = MockStore({("users", "email"): {"ada@example.com"}})
        outcome = check({"email": "unique:users,email"}, {"email": "bob@example.com"}, store=store)
        assert not outcome.has_failures()

    def test_column_defaults_to_field_name(self):
        store = MockStore({})
        check({"username": "unique:users"}, {"username": "ada"}, store=store)
        assert store.lookups == [("users", "username", "ada")]

    def test_without_store_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            check({"email": "unique:users,email"}, {"email": "ada@example.com"})


# =============================================================================
# Engine Behaviour
# =============================================================================


class TestEvaluate:
    def test_stops_at_first_failure_per_field(self):
        outcome = check({"email": "required|email|max:3"}, {"email": "nope"})
        assert outcome.errors == [
            FieldError(field="email", rule="email", message="The email field must be a valid email address.")
        ]

    def test_collects_errors_across_fields(self):
        outcome = check(
            {"username": "required", "email": "required|email", "age": "numeric"},
            {"email": "bad", "age": "old"},
        )
        assert outcome.failed_fields() == ["username", "email", "age"]

    def test_unknown_rule_raises(self):
        with pytest.raises(UnknownRuleError) as exc_info:
            check({"name": "required|shiny"}, {"name": "x"})
        assert exc_info.value.rule == "shiny"
        assert exc_info.value.field == "name"

    def test_unknown_rule_raises_even_after_failure(self):
        with pytest.raises(UnknownRuleError):
            check({"name": "required|shiny"}, {})

    def test_inputs_without_rules_are_ignored(self):
        outcome = check({"a": "required"}, {"a": "x", "extra": None})
        assert not outcome.has_failures()


class TestMessages:
    def test_field_rule_message_wins(self):
        outcome = check(
            {"email": "required"},
            {},
            {"email.required": "Email, please.", "required": "Fill it in."},
        )
        assert outcome.first("email") == "Email, please."

    def test_rule_message_is_used_next(self):
        outcome = check({"email": "required"}, {}, {"required": "Fill in {field}."})
        assert outcome.first("email") == "Fill in email."

    def test_default_message_includes_params(self):
        outcome = check({"age": "numeric|between:18,65"}, {"age": 70})
        assert outcome.first("age") == "The age field must be between 18 and 65."

    def test_unformattable_message_is_returned_as_is(self):
        outcome = check({"f": "required"}, {}, {"f.required": "Use {braces} {0}"})
        assert outcome.first("f") == "Use {braces} {0}"

    def test_empty_custom_message_is_kept(self):
        outcome = check({"f": "required"}, {}, {"f.required": "", "required": "Fill it in."})
        assert outcome.has("f")
        assert outcome.first("f") == ""

    def test_empty_rule_message_is_kept(self):
        outcome = check({"f": "required"}, {}, {"required": ""})
        assert outcome.get("f") == [""]


class TestValidationOutcome:
    def test_accessors(self):
        outcome = ValidationOutcome(errors=[
            FieldError("a", "required", "A is required."),
            FieldError("b", "email", "B is bad."),
        ])
        assert outcome.has_failures()
        assert outcome.has("a")
        assert not outcome.has("c")
        assert outcome.get("b") == ["B is bad."]
        assert outcome.first("c") is None
        assert outcome.all() == ["A is required.", "B is bad."]

    def test_to_dict(self):
        outcome = ValidationOutcome(errors=[FieldError("a", "required", "A is required.")])
        assert outcome.to_dict() == {"valid": False, "errors": {"a": ["A is required."]}}

    def test_empty_outcome(self):
        assert ValidationOutcome().to_dict() == {"valid": True, "errors": {}}


# =============================================================================
# Registry
# =============================================================================


class TestRuleRegistry:
    def test_builtins_registered(self):
        assert RuleRegistry.is_registered("required")
        assert "unique" in RuleRegistry.list_registered()

    def test_register_is_idempotent(self):
        original = RuleRegistry.get("required")
        RuleRegistry.register("required", lambda value, params, ctx: True)
        assert RuleRegistry.get("required") is original

    def test_custom_rule_decorator(self):
        @rule("even", message="The {field} field must be even.")
        def even(value, params, ctx):
            return int(value) % 2 == 0

        outcome = check({"n": "required|even"}, {"n": 3})
        assert outcome.first("n") == "The n field must be even."
        assert not check({"n": "even"}, {"n": 4}).has_failures()

    def test_custom_rule_sees_other_inputs(self):
        @rule("after_start")
        def after_start(value, params, ctx):
            return value > ctx.inputs["start"]

        assert not check({"end": "after_start"}, {"start": 5, "end": 6}).has_failures()
        assert check({"end": "after_start"}, {"start": 5, "end": 4}).has_failures()

    def test_clear(self):
        RuleRegistry.clear()
        assert RuleRegistry.list_registered() == []
