"""Splitting composed GraphQL queries into top-level fields.

The data layer never interprets a full GraphQL document. It only needs the
operation's variable definitions and, for each top-level field, the raw
argument and selection text so the field can be handed to the source that
owns it.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import QuerySyntaxError

_NAME = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")
_VARIABLE_DEFINITION = re.compile(r"\$([_A-Za-z][_0-9A-Za-z]*)\s*:")
_PAIRS = {"{": "}", "(": ")", "[": "]"}


@dataclass
class QueryField:
    """A top-level field of a query with its raw arguments and selection."""
    name: str
    alias: Optional[str] = None
    arguments: str = ""
    selection: str = ""

    @property
    def response_key(self) -> str:
        return self.alias or self.name


@dataclass
class ParsedQuery:
    """Variable definitions and top-level fields of one query operation."""
    fields: List[QueryField] = field(default_factory=list)
    variable_definitions: Dict[str, str] = field(default_factory=dict)

    def required_variables(self) -> List[str]:
        """Names of non-null variables that have no default value."""
        required = []
        for name, definition in self.variable_definitions.items():
            type_part = definition.split(":", 1)[1]
            if "=" not in type_part and type_part.strip().endswith("!"):
                required.append(name)
        return required

    def variables_used_by(self, text: str) -> List[str]:
        """Names of defined variables referenced in a fragment of query text."""
        return [
            name for name in self.variable_definitions
            if re.search(rf"\${re.escape(name)}\b", text)
        ]


def _skip_string(text: str, pos: int) -> int:
    """Return the index just past the string literal starting at pos."""
    if text.startswith('"""', pos):
        end = text.find('"""', pos + 3)
        if end == -1:
            raise QuerySyntaxError("Unterminated block string")
        return end + 3
    pos += 1
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == '"':
            return pos + 1
        if char == "\n":
            break
        pos += 1
    raise QuerySyntaxError("Unterminated string")


def _skip_ignored(text: str, pos: int) -> int:
    """Skip whitespace, commas and comments."""
    while pos < len(text):
        char = text[pos]
        if char.isspace() or char == ",":
            pos += 1
        elif char == "#":
            newline = text.find("\n", pos)
            pos = len(text) if newline == -1 else newline + 1
        else:
            break
    return pos


def _find_closing(text: str, pos: int) -> int:
    """Return the index of the bracket closing the one at pos."""
    stack = [_PAIRS[text[pos]]]
    pos += 1
    while pos < len(text):
        char = text[pos]
        if char == '"':
            pos = _skip_string(text, pos)
            continue
        if char == "#":
            pos = _skip_ignored(text, pos)
            continue
        if char in _PAIRS:
            stack.append(_PAIRS[char])
        elif char in ")]}":
            if char != stack.pop():
                raise QuerySyntaxError(f"Unexpected '{char}' at position {pos}")
            if not stack:
                return pos
        pos += 1
    raise QuerySyntaxError("Unbalanced brackets in query")


def parse_selection(text: str) -> List[QueryField]:
    """Split a selection set body into its fields (without descending into them)."""
    fields: List[QueryField] = []
    pos = _skip_ignored(text, 0)

    while pos < len(text):
        match = _NAME.match(text, pos)
        if not match:
            raise QuerySyntaxError(f"Expected a field name at position {pos}, found '{text[pos]}'")
        name = match.group(0)
        alias = None
        pos = _skip_ignored(text, match.end())

        if pos < len(text) and text[pos] == ":":
            pos = _skip_ignored(text, pos + 1)
            match = _NAME.match(text, pos)
            if not match:
                raise QuerySyntaxError(f"Expected a field name after alias '{name}'")
            alias, name = name, match.group(0)
            pos = _skip_ignored(text, match.end())

        arguments = ""
        if pos < len(text) and text[pos] == "(":
            end = _find_closing(text, pos)
            arguments = text[pos + 1:end].strip()
            pos = _skip_ignored(text, end + 1)

        selection = ""
        if pos < len(text) and text[pos] == "{":
            end = _find_closing(text, pos)
            selection = text[pos + 1:end].strip()
            pos = _skip_ignored(text, end + 1)

        fields.append(QueryField(name=name, alias=alias, arguments=arguments, selection=selection))

    return fields


def _parse_variable_definitions(header: str) -> Dict[str, str]:
    start = header.find("(")
    if start == -1:
        return {}
    end = _find_closing(header, start)
    body = header[start + 1:end]

    matches = list(_VARIABLE_DEFINITION.finditer(body))
    definitions: Dict[str, str] = {}
    for index, match in enumerate(matches):
        stop = matches[index + 1].start() if index + 1 < len(matches) else len(body)
        definitions[match.group(1)] = body[match.start():stop].strip().rstrip(",").strip()
    return definitions


def parse_query(query: str) -> ParsedQuery:
    """
    Parse a single query operation into variable definitions and top-level fields.

    Accepts the shorthand form ``{ ... }`` as well as
    ``query Name($var: Type!) { ... }``. Only one operation is supported.

    Raises:
        QuerySyntaxError: if the query is not a single well-formed operation
    """
    text = query.strip()
    pos = _skip_ignored(text, 0)
    open_brace = pos

    if not text.startswith("{", pos):
        keyword = _NAME.match(text, pos)
        if not keyword or keyword.group(0) != "query":
            raise QuerySyntaxError("Only query operations are supported")
        open_brace = pos = keyword.end()
        while open_brace < len(text) and text[open_brace] != "{":
            if text[open_brace] == "(":
                open_brace = _find_closing(text, open_brace)
            open_brace += 1
        if open_brace >= len(text):
            raise QuerySyntaxError("Query has no selection set")

    header = text[pos:open_brace]
    close_brace = _find_closing(text, open_brace)
    if _skip_ignored(text, close_brace + 1) != len(text):
        raise QuerySyntaxError("Unexpected content after the query operation")

    return ParsedQuery(
        fields=parse_selection(text[open_brace + 1:close_brace]),
        variable_definitions=_parse_variable_definitions(header),
    )


def mount_field(query: str, name: str, field_name: str) -> str:
    """
    Rewrite top-level field ``name`` to read from ``field_name``.

    The field keeps ``name`` as its response key, so callers reading
    ``data[name]`` are unaffected by where the source is mounted.
    """
    if name == field_name:
        return query

    parsed = parse_query(query)
    parts = []
    for field in parsed.fields:
        alias, field_name_out = field.alias, field.name
        if field.name == name:
            alias, field_name_out = field.alias or name, field_name
        text = f"{alias}: {field_name_out}" if alias else field_name_out
        if field.arguments:
            text += f"({field.arguments})"
        if field.selection:
            text += f" {{ {field.selection} }}"
        parts.append(text)

    body = "{ " + " ".join(parts) + " }"
    if parsed.variable_definitions:
        return f"query({', '.join(parsed.variable_definitions.values())}) {body}"
    return body
