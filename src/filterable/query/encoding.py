"""Query-string encoding for the Filterable wire format.

Names, keys and values are percent-encoded one component at a time with the
same safe set as JavaScript's encodeURIComponent; the structural characters
(?, &, =, [ and ]) are written around the encoded components and never
encoded themselves.
"""

import json
import re
from typing import Any, Dict, List, Mapping, Tuple
from urllib.parse import quote, unquote

from pydantic import BaseModel, Field

# Unreserved characters left as-is by encodeURIComponent
SAFE_CHARACTERS = "-_.!~*'()"

FILTERS_KEY = "filters"

_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_BRACKET_PATTERN = re.compile(r"\[([^\[\]]*)\]")

Pair = Tuple[str, str]


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (set, frozenset)):
        # Sets have no order of their own; sort by wire text.
        return sorted(value, key=render_value)
    return value


def render_value(value: Any) -> str:
    """
    Render a single value as the text that goes on the wire (before encoding).

    - True/False render as "true"/"false" and None as "null"
    - integral floats render without a fractional part (20.0 -> "20")
    - lists, tuples and sets are comma-joined, element by element (sets sorted)
    - mappings and pydantic models render as compact JSON
    - anything else goes through str()
    """
    value = _plain(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(render_value(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def encode_component(value: Any) -> str:
    """Percent-encode one name, key or value component."""
    return quote(render_value(value), safe=SAFE_CHARACTERS)


def constraint_pairs(filter_name: str, value: Any) -> List[Pair]:
    """Encoded pairs for a filter constraint: always filters[<name>][]=<value>."""
    return [(f"{FILTERS_KEY}[{encode_component(filter_name)}][]", encode_component(value))]


def parameter_pairs(name: str, value: Any) -> List[Pair]:
    """
    Encoded pairs for an appended parameter, branching on the value's shape.

    Args:
        name: Parameter name
        value: Sequence, mapping or scalar value

    Returns:
        List of (encoded key, encoded value) pairs; empty for an empty sequence
    """
    encoded_name = encode_component(name)
    value = _plain(value)

    if isinstance(value, (list, tuple)):
        return [(f"{encoded_name}[]", encode_component(item)) for item in value]
    if isinstance(value, Mapping):
        return [
            (f"{encoded_name}[{encode_component(key)}]", encode_component(item))
            for key, item in value.items()
        ]
    return [(encoded_name, encode_component(value))]


def flatten_pairs(prefix: str, value: Any) -> List[Pair]:
    """
    Flatten a nested value into bracketed form fields (unencoded).

    Mappings nest as prefix[key], scalar list (or set) items as prefix[] and composite
    list items as prefix[index]. None becomes an empty string.
    """
    value = _plain(value)
    if isinstance(value, Mapping):
        pairs: List[Pair] = []
        for key, item in value.items():
            pairs.extend(flatten_pairs(f"{prefix}[{key}]", item))
        return pairs
    if isinstance(value, (list, tuple)):
        pairs = []
        for index, item in enumerate(value):
            item = _plain(item)
            if isinstance(item, (Mapping, list, tuple)):
                pairs.extend(flatten_pairs(f"{prefix}[{index}]", item))
            else:
                pairs.extend(flatten_pairs(f"{prefix}[]", item))
        return pairs
    if value is None:
        return [(prefix, "")]
    return [(prefix, render_value(value))]


def encode_form(attributes: Any) -> List[Pair]:
    """Flatten request attributes into form fields for a POST body."""
    attributes = _plain(attributes)
    if attributes is None:
        return []
    if not isinstance(attributes, Mapping):
        raise TypeError(f"Request attributes must be a mapping, got {type(attributes).__name__}")

    pairs: List[Pair] = []
    for key, value in attributes.items():
        pairs.extend(flatten_pairs(str(key), value))
    return pairs


class ParsedQuery(BaseModel):
    """Constraints and parameters recovered from a query string."""

    filters: Dict[str, List[str]] = Field(default_factory=dict)
    params: Dict[str, Any] = Field(default_factory=dict)


def parse_query_string(query_string: str) -> ParsedQuery:
    """
    Parse a query string in the Filterable wire format.

    Values come back as strings; the leading "?" is optional.

    Raises:
        ValueError: If a key does not follow the name / name[] / name[key] shapes
    """
    parsed = ParsedQuery()
    trimmed = query_string.strip()
    if trimmed.startswith("?"):
        trimmed = trimmed[1:]
    if not trimmed:
        return parsed

    for chunk in trimmed.split("&"):
        if not chunk:
            continue
        raw_key, _, raw_value = chunk.partition("=")
        match = _KEY_PATTERN.match(raw_key)
        if match is None:
            raise ValueError(f"Malformed query key: {raw_key}")

        name = unquote(match.group(1))
        brackets = [unquote(part) for part in _BRACKET_PATTERN.findall(match.group(2))]
        value = unquote(raw_value)

        if name == FILTERS_KEY and len(brackets) == 2 and brackets[1] == "":
            parsed.filters.setdefault(brackets[0], []).append(value)
        elif not brackets:
            parsed.params[name] = value
        elif brackets == [""]:
            parsed.params.setdefault(name, []).append(value)
        elif len(brackets) == 1:
            parsed.params.setdefault(name, {})[brackets[0]] = value
        else:
            raise ValueError(f"Unsupported nesting in query key: {raw_key}")

    return parsed
