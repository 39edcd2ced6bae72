"""
Resource tree helpers: value kinds, JSON pointers, leaf iteration.

A resource tree is what `json.load` returns for a locale file: dicts
(insertion ordered), lists, str, int/float, bool and None.
"""

from enum import Enum
from typing import Any, Iterator, List, Tuple

from i18n_recreate.exceptions import UnsupportedValueError


class ValueKind(Enum):
    STRING = "string"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


# Returned by resolve_pointer when nothing lives at the pointer
MISSING = object()


def kind_of(value: Any, pointer: str = "") -> ValueKind:
    """
    Classify a tree value.

    bool is checked before numbers because it is an int subclass.

    Raises:
        UnsupportedValueError: For anything JSON cannot represent.
    """
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if value is None:
        return ValueKind.NULL
    raise UnsupportedValueError(value, pointer)


def escape_pointer_token(token) -> str:
    """RFC 6901 escaping: '~' -> '~0', '/' -> '~1'."""
    return str(token).replace('~', '~0').replace('/', '~1')


def unescape_pointer_token(token: str) -> str:
    return token.replace('~1', '/').replace('~0', '~')


def join_pointer(parent: str, token) -> str:
    """
    Append one reference token to a JSON pointer.

    Examples:
        >>> join_pointer('', 'menu')
        '/menu'
        >>> join_pointer('/menu', 'a/b')
        '/menu/a~1b'
    """
    return f"{parent}/{escape_pointer_token(token)}"


def split_pointer(pointer: str) -> List[str]:
    if pointer == "":
        return []
    if not pointer.startswith('/'):
        raise ValueError(f"Invalid JSON pointer: {pointer!r}")
    return [unescape_pointer_token(token) for token in pointer[1:].split('/')]


def resolve_pointer(tree: Any, pointer: str) -> Any:
    """Return the value at pointer, or MISSING."""
    node = tree
    for token in split_pointer(pointer):
        if isinstance(node, dict):
            if token not in node:
                return MISSING
            node = node[token]
        elif isinstance(node, (list, tuple)):
            if not token.isdigit() or int(token) >= len(node):
                return MISSING
            node = node[int(token)]
        else:
            return MISSING
    return node


def iter_string_leaves(tree: Any) -> Iterator[Tuple[str, str]]:
    """
    Yield (pointer, text) for every string leaf in document order.

    Uses an explicit stack so nesting depth is not limited by the
    interpreter's recursion limit.
    """
    stack = [(tree, "")]
    while stack:
        node, pointer = stack.pop()
        kind = kind_of(node, pointer)
        if kind is ValueKind.STRING:
            yield pointer, node
        elif kind is ValueKind.MAPPING:
            stack.extend(reversed([(v, join_pointer(pointer, k)) for k, v in node.items()]))
        elif kind is ValueKind.SEQUENCE:
            stack.extend(reversed([(v, join_pointer(pointer, i)) for i, v in enumerate(node)]))


def needs_translation(text: str) -> bool:
    """Empty and whitespace-only strings are passed through untouched."""
    return bool(text and text.strip())


def same_shape(left: Any, right: Any) -> bool:
    """
    True when both trees have the same nesting, key order, sequence lengths
    and the same kind at every leaf position.
    """
    stack = [(left, right, "")]
    while stack:
        a, b, pointer = stack.pop()
        kind_a, kind_b = kind_of(a, pointer), kind_of(b, pointer)
        if kind_a is not kind_b:
            return False
        if kind_a is ValueKind.MAPPING:
            if list(a.keys()) != list(b.keys()):
                return False
            stack.extend((a[k], b[k], join_pointer(pointer, k)) for k in a)
        elif kind_a is ValueKind.SEQUENCE:
            if len(a) != len(b):
                return False
            stack.extend((x, y, join_pointer(pointer, i)) for i, (x, y) in enumerate(zip(a, b)))
    return True
