"""
Rule kinds shared by every rulebook.

A rule turns the value resolved for one placeholder into the shape the
template expects. Rules are plain callables ``rule(value, ctx) -> value``;
the helpers below build the handful of recurring kinds (choice flags,
multi-select flags, table rows, starts-with classifiers) from per-field
option tables so rulebooks are mostly data.

Every helper tolerates missing or oddly shaped input: a dict is expected
but anything else reads as empty.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ..path_resolver import is_falsy, resolve
from ..shared import MappingFile

SPACE = " "

EQUALS = "equals"
STARTS_WITH = "startswith"
ENDS_WITH = "endswith"


@dataclass(frozen=True)
class RuleContext:
    """What a rule may look at besides its own resolved value."""
    placeholder: str
    json_path: Optional[str]
    raw_data: Any
    mapping_file: MappingFile

    def find_json_path(self, placeholder: str) -> Optional[str]:
        return self.mapping_file.find_json_path(placeholder)

    def resolve(self, path: Optional[str], data: Any = None) -> Any:
        """Resolve ``path`` against ``data`` (the raw survey data by default)."""
        return resolve(self.raw_data if data is None else data, path)


Rule = Callable[[Any, RuleContext], Any]
RowBuilder = Callable[[Any, RuleContext], Dict[str, Any]]
FieldSpec = Union[Sequence[str], Mapping[str, str]]

# ------------------------- Value access -------------------------

def dig(value: Any, *keys: str, default: Any = None) -> Any:
    """Nested dict lookup that returns ``default`` at the first missing step."""
    current = value
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def text(value: Any, default: Any = SPACE) -> Any:
    """``value`` unless it is empty, in which case ``default`` (a single space)."""
    return default if is_falsy(value) else value


def first_of(*values: Any, default: Any = "") -> Any:
    """The first non-empty value, like chained ``or`` with a fixed fallback."""
    for value in values:
        if not is_falsy(value):
            return value
    return default


def option_of(value: Any) -> str:
    """The chosen option of a bare string answer or an ``{"option": ...}`` answer."""
    if isinstance(value, str):
        return value
    option = dig(value, "option")
    return option if isinstance(option, str) else ""


def as_list(value: Any, wrap_scalar: bool = False) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if wrap_scalar and not is_falsy(value):
        return [value]
    return []


def _fields(fields: FieldSpec) -> Dict[str, str]:
    if isinstance(fields, Mapping):
        return dict(fields)
    return {name: name for name in fields}

# ------------------------- Flags -------------------------

def is_chosen(raw: Any, literal: str, how: str = EQUALS) -> bool:
    answer = option_of(raw)
    if not answer:
        return False
    if how == STARTS_WITH:
        return answer.startswith(literal)
    if how == ENDS_WITH:
        return answer.endswith(literal)
    return answer == literal


def choice_flags(
    raw: Any,
    options: Mapping[str, str],
    how: str = EQUALS,
    default: Optional[str] = None,
) -> Dict[str, bool]:
    """
    One boolean per option key, true iff the answer matches that option's literal.

    With ``default``, that key is set when no option matched.
    """
    flags = {key: is_chosen(raw, literal, how) for key, literal in options.items()}
    if default is not None and not any(flags.values()):
        flags[default] = True
    return flags


def selected_flags(raw: Any, fields: FieldSpec, strict: bool = False) -> Dict[str, bool]:
    """
    One boolean per field for a multi-select answer.

    A dict answer is read per source key (``is True`` when ``strict``,
    truthiness otherwise), a list answer by membership and a bare string
    by equality.
    """
    pairs = _fields(fields)
    if isinstance(raw, dict):
        if strict:
            return {out: raw.get(src) is True for out, src in pairs.items()}
        return {out: not is_falsy(raw.get(src)) for out, src in pairs.items()}
    if isinstance(raw, (list, tuple)):
        chosen = {option_of(item) for item in raw}
        return {out: src in chosen for out, src in pairs.items()}
    if isinstance(raw, str):
        return {out: raw == src for out, src in pairs.items()}
    return {out: False for out in pairs}

# ------------------------- Rule kinds -------------------------

def passthrough(value: Any, ctx: RuleContext) -> Any:
    return value


def text_or_space(value: Any, ctx: RuleContext) -> Any:
    return text(value)


def name_of(value: Any, ctx: RuleContext) -> Any:
    return text(dig(value, "name"))


# every questionnaire carries these
TITLE_RULES: Dict[str, Rule] = {"title": passthrough, "title_1": passthrough}


def single_choice(
    options: Mapping[str, str],
    wrap: bool = True,
    default: Optional[str] = None,
    how: str = EQUALS,
) -> Rule:
    """Exclusive choice encoded as flags, by default wrapped in a one-element list."""
    def rule(value: Any, ctx: RuleContext) -> Any:
        flags = choice_flags(value, options, how, default)
        return [flags] if wrap else flags
    return rule


def options_of(*keys: str, prefix: str = "") -> Dict[str, str]:
    """Option table whose literals are the keys themselves: ``{prefix + key: key}``."""
    return {f"{prefix}{key}": key for key in keys}


def classifier(options: Mapping[str, str], how: str = STARTS_WITH) -> Rule:
    """Starts-with classifier: a bare flag object, one key per literal prefix."""
    return single_choice(options, wrap=False, how=how)


YES_PARTIALLY_NO = {"no": "No", "partially": "Partially", "yes": "Yes"}

yes_partially_no = classifier(YES_PARTIALLY_NO)


def multi_select(fields: FieldSpec, wrap: bool = True, strict: bool = False) -> Rule:
    def rule(value: Any, ctx: RuleContext) -> Any:
        flags = selected_flags(value, fields, strict)
        return [flags] if wrap else flags
    return rule


def table_rows(
    build_row: RowBuilder,
    sentinel: Optional[Any] = None,
    wrap_scalar: bool = False,
) -> Rule:
    """
    Map a list of answers to rows of a fixed shape.

    An empty list yields exactly one sentinel row: ``sentinel`` when given,
    otherwise ``build_row`` applied to an empty answer. The returned rule
    carries ``is_table = True`` (see ``Rulebook.tables``).
    """
    def rule(value: Any, ctx: RuleContext) -> List[Any]:
        rows = [build_row(item, ctx) for item in as_list(value, wrap_scalar)]
        if not rows:
            rows = [copy.deepcopy(sentinel) if sentinel is not None else build_row({}, ctx)]
        return rows
    rule.is_table = True  # type: ignore[attr-defined]
    return rule


def free_list(extract: Optional[Callable[[Any], Any]] = None, wrap_scalar: bool = True) -> Rule:
    """A list of extracted sub-values with empty entries dropped."""
    def rule(value: Any, ctx: RuleContext) -> List[Any]:
        items = as_list(value, wrap_scalar)
        if extract is not None:
            items = [extract(item) for item in items]
        return [item for item in items if not is_falsy(item)]
    return rule


def used_features(value: Any) -> List[Any]:
    """Coerce a ``*_used_features`` answer to a list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    if is_falsy(value) or value == {}:
        return []
    return [value]


__all__ = [
    "ENDS_WITH",
    "EQUALS",
    "STARTS_WITH",
    "SPACE",
    "TITLE_RULES",
    "YES_PARTIALLY_NO",
    "Rule",
    "RuleContext",
    "as_list",
    "choice_flags",
    "classifier",
    "dig",
    "first_of",
    "free_list",
    "is_chosen",
    "multi_select",
    "name_of",
    "option_of",
    "options_of",
    "passthrough",
    "selected_flags",
    "single_choice",
    "table_rows",
    "text",
    "text_or_space",
    "used_features",
    "yes_partially_no",
]
