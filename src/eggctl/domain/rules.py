"""Validation rules derived from egg variable rule expressions.

Eggs declare rules as pipe-separated expressions in the panel's own
format, e.g. ``required|string|max:20`` or ``nullable|integer|between:1,100``.
This module parses them and checks resolved values against the subset
of rules that make sense for a single string value.  Unsupported rules
are skipped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from pydantic import BaseModel

if TYPE_CHECKING:
    from eggctl.domain.egg import VariableDeclaration

logger = logging.getLogger(__name__)

# Rules whose arguments may contain the separator characters.
_RAW_ARG_RULES = frozenset({"regex", "not_regex"})


class Rule(BaseModel):
    """One parsed rule, e.g. ``max:20`` → ``Rule(name="max", args=("20",))``."""

    model_config = {"frozen": True}

    name: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}:{','.join(self.args)}"


def _delimiter_positions(text: str, delimiter: str) -> list[int]:
    """Indexes of *delimiter* in *text* that are not escaped by a backslash."""
    positions: list[int] = []
    escaped = False
    for index, char in enumerate(text):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == delimiter:
            positions.append(index)
    return positions


def _split_expression(expression: str) -> list[str]:
    """Split on ``|`` except inside a ``regex:`` pattern.

    A regex rule runs to its closing delimiter, so ``regex:/^(a|b)$/``
    stays one part.  Escaped delimiters (``\\/``) do not close the pattern.
    """
    parts: list[str] = []
    rest = expression
    while rest:
        name = rest.split(":", 1)[0].split("|", 1)[0].strip()
        if name in _RAW_ARG_RULES and rest.startswith(f"{name}:"):
            body = rest[len(name) + 1 :]
            delimiter = body[:1]
            closing = [i for i in _delimiter_positions(body, delimiter) if i > 0]
            if delimiter and closing:
                end = closing[0]
                pipe = body.find("|", end)
                cut = len(body) if pipe == -1 else pipe
                parts.append(f"{name}:{body[:cut]}")
                rest = body[cut + 1 :] if pipe != -1 else ""
                continue
        head, _, rest = rest.partition("|")
        parts.append(head)
    return [p.strip() for p in parts if p.strip()]


def parse_rules(expression: str | None) -> list[Rule]:
    """Parse a rule expression into :class:`Rule` objects, in order.

    Examples:
        >>> [str(r) for r in parse_rules("required|string|max:20")]
        ['required', 'string', 'max:20']
        >>> parse_rules("in:a,b")[0].args
        ('a', 'b')
    """
    rules: list[Rule] = []
    for part in _split_expression(expression or ""):
        name, _, raw = part.partition(":")
        name = name.strip().lower()
        if name in _RAW_ARG_RULES:
            args: tuple[str, ...] = (raw,) if raw else ()
        else:
            args = tuple(a.strip() for a in raw.split(",")) if raw else ()
        rules.append(Rule(name=name, args=args))
    return rules


def service_rules(declarations: Iterable[VariableDeclaration] | None) -> dict[str, list[Rule]]:
    """Map each variable key to the rules its egg declares."""
    return {d.key: parse_rules(d.rules) for d in declarations or ()}


# --- Value checks ---


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _as_number(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()) is not None


def _measure(value: Any, numeric: bool) -> float:
    """Size of *value*: its number when numeric, else its length."""
    if numeric:
        number = _as_number(value)
        if number is not None:
            return number
    return float(len(str(value)))


def _compile_pattern(arg: str) -> re.Pattern[str] | None:
    """Compile a delimited pattern such as ``/^[a-z]+$/i``."""
    if len(arg) < 2:
        return None
    delimiter = arg[0]
    closing = [i for i in _delimiter_positions(arg, delimiter) if i > 0]
    if not closing:
        return None
    end = closing[-1]
    flags = 0
    for char in arg[end + 1 :]:
        flags |= {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}.get(
            char, 0
        )
    try:
        return re.compile(arg[1:end], flags)
    except re.error:
        logger.debug("Unusable regex rule %r", arg)
        return None


def _url_ok(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


_TYPE_CHECKS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "string": (lambda v: isinstance(v, str), "must be a string"),
    "integer": (_is_integer, "must be an integer"),
    "numeric": (lambda v: not isinstance(v, bool) and _as_number(v) is not None, "must be a number"),
    "boolean": (
        lambda v: v in (True, False, 0, 1, "0", "1", "true", "false"),
        "must be true or false",
    ),
    "alpha": (lambda v: re.fullmatch(r"[^\W\d_]+", str(v)) is not None, "may only contain letters"),
    "alpha_num": (
        lambda v: re.fullmatch(r"[^\W_]+", str(v)) is not None,
        "may only contain letters and numbers",
    ),
    "alpha_dash": (
        lambda v: re.fullmatch(r"[\w-]+", str(v)) is not None,
        "may only contain letters, numbers, dashes and underscores",
    ),
    "url": (lambda v: _url_ok(str(v)), "must be a valid URL"),
}

_NUMERIC_RULES = frozenset({"integer", "numeric"})
_PRESENCE_RULES = frozenset({"required", "nullable", "sometimes", "present", "filled"})


def check_value(value: Any, rules: list[Rule]) -> list[str]:
    """Return the problems with *value* under *rules* (empty when valid)."""
    names = {r.name for r in rules}
    if _is_blank(value):
        if "required" in names or "filled" in names:
            return ["is required"]
        return []

    numeric = bool(names & _NUMERIC_RULES)
    errors: list[str] = []
    for rule in rules:
        if rule.name in _PRESENCE_RULES:
            continue
        if rule.name in _TYPE_CHECKS:
            check, message = _TYPE_CHECKS[rule.name]
            if not check(value):
                errors.append(message)
            continue
        error = _check_argument_rule(value, rule, numeric)
        if error:
            errors.append(error)
    return errors


def _check_argument_rule(value: Any, rule: Rule, numeric: bool) -> str | None:
    args = rule.args
    unit = "" if numeric else " characters"
    if rule.name in ("min", "max", "size") and args:
        limit = _as_number(args[0])
        if limit is None:
            return None
        size = _measure(value, numeric)
        if rule.name == "min" and size < limit:
            return f"must be at least {args[0]}{unit}"
        if rule.name == "max" and size > limit:
            return f"may not be greater than {args[0]}{unit}"
        if rule.name == "size" and size != limit:
            return f"must be exactly {args[0]}{unit}"
        return None
    if rule.name == "between" and len(args) == 2:
        low, high = _as_number(args[0]), _as_number(args[1])
        if low is None or high is None:
            return None
        size = _measure(value, numeric)
        if not low <= size <= high:
            return f"must be between {args[0]} and {args[1]}{unit}"
        return None
    if rule.name == "in":
        return None if str(value) in args else f"must be one of: {', '.join(args)}"
    if rule.name == "not_in":
        return f"may not be one of: {', '.join(args)}" if str(value) in args else None
    if rule.name in _RAW_ARG_RULES and args:
        pattern = _compile_pattern(args[0])
        if pattern is None:
            return None
        matched = pattern.search(str(value)) is not None
        if rule.name == "regex" and not matched:
            return "has an invalid format"
        if rule.name == "not_regex" and matched:
            return "has an invalid format"
        return None
    logger.debug("Skipping unsupported rule %s", rule)
    return None


def validate_environment(
    declarations: Iterable[VariableDeclaration] | None,
    environment: Mapping[str, Any],
) -> dict[str, list[str]]:
    """Check resolved values against their egg rules.

    Returns ``{variable_key: [problem, ...]}`` for failing variables only.
    """
    errors: dict[str, list[str]] = {}
    for declaration in declarations or ():
        problems = check_value(
            environment.get(declaration.env_variable),
            parse_rules(declaration.rules),
        )
        if problems:
            errors[declaration.key] = problems
    return errors
