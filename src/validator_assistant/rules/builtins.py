"""Built-in rules for the reference engine.

Rule tokens handled here:
- Presence: required, nullable
- Formats: email, url, uuid, date, alpha, alpha_num, regex:pattern
- Types: numeric, integer, string, boolean
- Size: min:n, max:n, between:a,b (value for numeric fields, length otherwise)
- Membership: in:a,b,..., not_in:a,b,...
- Comparison: same:other, confirmed
- Store lookups: unique:table[,column]

Every check except "required" only sees non-empty values; the engine skips
the others when the value is empty.
"""

import re
from datetime import date
from typing import Any

from validator_assistant.errors import RuleConfigurationError
from validator_assistant.rules.registry import RuleContext, RuleRegistry


# =============================================================================
# Format Patterns
# =============================================================================

# Email: Basic RFC 5322 compliant pattern
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# URL: Basic URL pattern
URL_PATTERN = re.compile(
    r"^https?://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


# =============================================================================
# Helpers
# =============================================================================


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, dict)) and len(value) == 0:
        return True
    return False


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _param_number(name: str, params: list[str], index: int = 0) -> float:
    """Read a numeric rule parameter, e.g. the 13 in "min:13"."""
    try:
        return float(params[index])
    except IndexError:
        raise RuleConfigurationError(
            f"Rule '{name}' requires {index + 1} parameter(s)"
        ) from None
    except ValueError:
        raise RuleConfigurationError(
            f"Rule '{name}' parameter '{params[index]}' is not a number"
        ) from None


def _size(value: Any, ctx: RuleContext) -> float | None:
    """Size used by min/max/between: the number itself or a length."""
    if ctx.numeric:
        return _to_number(value)
    if isinstance(value, (str, list, dict, tuple)):
        return float(len(value))
    return _to_number(value)


# =============================================================================
# Checks
# =============================================================================


def _required(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return not is_empty(value)


def _nullable(value: Any, params: list[str], ctx: RuleContext) -> bool:
    # Marker only; empty values already skip non-implicit rules.
    return True


def _email(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def _url(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return isinstance(value, str) and URL_PATTERN.match(value) is not None


def _uuid(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return isinstance(value, str) and UUID_PATTERN.match(value) is not None


def _date(value: Any, params: list[str], ctx: RuleContext) -> bool:
    if isinstance(value, date):
        return True
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _numeric(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return _to_number(value) is not None


def _integer(value: Any, params: list[str], ctx: RuleContext) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and INTEGER_PATTERN.match(value.strip()) is not None


def _string(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return isinstance(value, str)


def _boolean(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return value in (True, False, 0, 1, "0", "1", "true", "false")


def _alpha(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return isinstance(value, str) and value.isalpha()


def _alpha_num(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return isinstance(value, str) and value.isalnum()


def _min(value: Any, params: list[str], ctx: RuleContext) -> bool:
    bound = _param_number("min", params)
    size = _size(value, ctx)
    return size is not None and size >= bound


def _max(value: Any, params: list[str], ctx: RuleContext) -> bool:
    bound = _param_number("max", params)
    size = _size(value, ctx)
    return size is not None and size <= bound


def _between(value: Any, params: list[str], ctx: RuleContext) -> bool:
    low = _param_number("between", params, 0)
    high = _param_number("between", params, 1)
    size = _size(value, ctx)
    return size is not None and low <= size <= high


def _in(value: Any, params: list[str], ctx: RuleContext) -> bool:
    if isinstance(value, list):
        return all(str(v) in params for v in value)
    return str(value) in params


def _not_in(value: Any, params: list[str], ctx: RuleContext) -> bool:
    if isinstance(value, list):
        return not any(str(v) in params for v in value)
    return str(value) not in params


def _regex(value: Any, params: list[str], ctx: RuleContext) -> bool:
    if not params or not params[0]:
        raise RuleConfigurationError("Rule 'regex' requires a pattern")
    try:
        pattern = re.compile(params[0])
    except re.error as exc:
        raise RuleConfigurationError(
            f"Rule 'regex' on field '{ctx.field}' has an invalid pattern: {exc}"
        ) from exc
    return isinstance(value, str) and pattern.search(value) is not None


def _same(value: Any, params: list[str], ctx: RuleContext) -> bool:
    if not params:
        raise RuleConfigurationError("Rule 'same' requires the other field's name")
    return value == ctx.inputs.get(params[0])


def _confirmed(value: Any, params: list[str], ctx: RuleContext) -> bool:
    return value == ctx.inputs.get(f"{ctx.field}_confirmation")


def _unique(value: Any, params: list[str], ctx: RuleContext) -> bool:
    if not params or not params[0]:
        raise RuleConfigurationError("Rule 'unique' requires a table name")
    if ctx.store is None:
        raise RuleConfigurationError(
            f"Rule 'unique' on field '{ctx.field}' needs a store; "
            "pass one to RuleEngine(store=...)"
        )
    table = params[0]
    column = params[1] if len(params) > 1 and params[1] else ctx.field
    return not ctx.store.exists(table, column, value)


# =============================================================================
# Registration
# =============================================================================


def register_builtin_rules() -> None:
    """Register all built-in rules with the RuleRegistry."""
    RuleRegistry.register("required", _required, "The {field} field is required.", implicit=True)
    RuleRegistry.register("nullable", _nullable)
    RuleRegistry.register("email", _email, "The {field} field must be a valid email address.")
    RuleRegistry.register("url", _url, "The {field} field must be a valid URL.")
    RuleRegistry.register("uuid", _uuid, "The {field} field must be a valid UUID.")
    RuleRegistry.register("date", _date, "The {field} field must be a valid date (YYYY-MM-DD).")
    RuleRegistry.register("numeric", _numeric, "The {field} field must be a number.")
    RuleRegistry.register("integer", _integer, "The {field} field must be an integer.")
    RuleRegistry.register("string", _string, "The {field} field must be a string.")
    RuleRegistry.register("boolean", _boolean, "The {field} field must be true or false.")
    RuleRegistry.register("alpha", _alpha, "The {field} field may only contain letters.")
    RuleRegistry.register(
        "alpha_num", _alpha_num, "The {field} field may only contain letters and numbers."
    )
    RuleRegistry.register("min", _min, "The {field} field must be at least {0}.")
    RuleRegistry.register("max", _max, "The {field} field may not be greater than {0}.")
    RuleRegistry.register("between", _between, "The {field} field must be between {0} and {1}.")
    RuleRegistry.register("in", _in, "The selected {field} is invalid.")
    RuleRegistry.register("not_in", _not_in, "The selected {field} is invalid.")
    RuleRegistry.register("regex", _regex, "The {field} field format is invalid.")
    RuleRegistry.register("same", _same, "The {field} field must match {0}.")
    RuleRegistry.register("confirmed", _confirmed, "The {field} confirmation does not match.")
    RuleRegistry.register("unique", _unique, "The {field} has already been taken.")
