"""Tree-sitter extraction of helper calls from Ruby source.

Shared by all three adapters: ERB and Haml are first turned into Ruby,
then scanned here.  Recognised call shapes:

- ``users_path``            bare identifier (not a local or parameter)
- ``user_path(@user)``      receiver-less call with arguments
- ``edit_user_url @user``   receiver-less command call
- ``self.root_path``        call on ``self``

Calls on any other receiver (``request.original_url``) are not helper
calls and are ignored.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterator
from typing import Any

from routecheck.errors import ParserNotInstalledError
from routecheck.model import HelperCall

HELPER_NAME_RE = re.compile(r"^[a-z_][a-zA-Z0-9_]*_(?:path|url)$")

_ASSIGNMENT_TYPES = frozenset({"assignment", "operator_assignment"})
_MULTIPLE_TARGET_TYPES = frozenset({"left_assignment_list", "destructured_left_assignment"})
_PARAMETER_LIST_TYPES = frozenset({"method_parameters", "lambda_parameters", "block_parameters"})
_PARAMETER_TYPES = frozenset({
    "optional_parameter",
    "keyword_parameter",
    "splat_parameter",
    "hash_splat_parameter",
    "block_parameter",
    "destructured_parameter",
})
# Nodes whose ``name`` field is a declaration, not a call
_NAMED_DECLARATION_TYPES = frozenset({"method", "singleton_method", "scope_resolution"})
# Scopes that start with no visible locals
_HARD_SCOPE_TYPES = frozenset({
    "program",
    "method",
    "singleton_method",
    "class",
    "module",
    "singleton_class",
})
# Scopes that also see the locals of the scope around them
_BLOCK_SCOPE_TYPES = frozenset({"block", "do_block", "lambda"})
_SCOPE_TYPES = _HARD_SCOPE_TYPES | _BLOCK_SCOPE_TYPES

# (start_byte, end_byte, type) identifies a node within one tree
NodeKey = tuple[int, int, str]
# scope -> [(bound name, byte offset of the binding)]
Bindings = dict[NodeKey, list[tuple[str, int]]]


@functools.cache
def _get_ruby_parser() -> Any:
    """Load the tree-sitter Ruby parser, raising a clear error if missing."""
    try:
        from tree_sitter_language_pack import get_parser
    except ImportError:
        msg = (
            "routecheck requires 'tree-sitter-language-pack' to parse Ruby. "
            "Install it with: pip install tree-sitter-language-pack"
        )
        raise ParserNotInstalledError(msg) from None

    return get_parser("ruby")


def extract_helper_calls(source: bytes | str) -> list[tuple[str, int]]:
    """Return ``(helper_name, line)`` pairs found in Ruby ``source``.

    Lines are 1-based and listed in source order.  A bare name counts as
    a local variable only inside the scope that binds it, and only from
    the binding onwards.
    """
    data = source.encode("utf-8") if isinstance(source, str) else source
    root = _get_ruby_parser().parse(data).root_node
    bindings = _bindings(root, data)

    calls: list[tuple[str, int]] = []
    for node in _walk(root):
        name_node = _helper_name_node(node, bindings, data)
        if name_node is None:
            continue
        name = _text(name_node, data)
        if HELPER_NAME_RE.match(name):
            calls.append((name, name_node.start_point[0] + 1))
    return calls


def _helper_name_node(node: Any, bindings: Bindings, data: bytes) -> Any | None:
    """The identifier naming a helper call at ``node``, if it is one."""
    if node.type == "call":
        method = node.child_by_field_name("method")
        if method is None or method.type != "identifier":
            return None
        receiver = node.child_by_field_name("receiver")
        if receiver is not None and receiver.type != "self":
            return None
        return method

    if node.type != "identifier":
        return None

    parent = node.parent
    if parent is not None:
        # Counted once, through the enclosing call node
        if parent.type == "call" and _same(parent.child_by_field_name("method"), node):
            return None
        if parent.type in _NAMED_DECLARATION_TYPES and _same(
            parent.child_by_field_name("name"), node,
        ):
            return None
        if parent.type in _PARAMETER_LIST_TYPES:
            return None
        # Default values are expressions; only the parameter name is a binding
        if parent.type in _PARAMETER_TYPES and _same(parent.child_by_field_name("name"), node):
            return None
        if parent.type in ("alias", "undef"):
            return None
    if _is_bound(node, _text(node, data), bindings):
        return None
    return node


def _bindings(root: Any, data: bytes) -> Bindings:
    """Locals and parameters, grouped by the scope that binds them."""
    bindings: Bindings = {}
    for node in _walk(root):
        for name_node in _bound_identifiers(node):
            scope = _enclosing_scope(name_node)
            if scope is None:
                continue
            bindings.setdefault(_key(scope), []).append(
                (_text(name_node, data), name_node.start_byte),
            )
    return bindings


def _bound_identifiers(node: Any) -> Iterator[Any]:
    """Identifier nodes that ``node`` binds as locals."""
    if node.type in _ASSIGNMENT_TYPES:
        left = node.child_by_field_name("left")
        if left is None:
            return
        if left.type == "identifier":
            yield left
        elif left.type in _MULTIPLE_TARGET_TYPES:
            yield from _identifiers(left)
    elif node.type in _PARAMETER_LIST_TYPES:
        for child in node.named_children:
            if child.type == "identifier":
                yield child
            elif child.type in _PARAMETER_TYPES:
                name = child.child_by_field_name("name")
                if name is not None and name.type == "identifier":
                    yield name
                else:
                    yield from _identifiers(child)
    elif node.type == "for":
        pattern = node.child_by_field_name("pattern")
        if pattern is not None:
            yield from _identifiers(pattern)
    elif node.type == "exception_variable":
        yield from _identifiers(node)


def _is_bound(node: Any, name: str, bindings: Bindings) -> bool:
    """True if ``name`` is a local visible at ``node``.

    Blocks see the locals of the scopes around them; methods, classes
    and modules do not.
    """
    scope = _enclosing_scope(node)
    while scope is not None:
        for bound, offset in bindings.get(_key(scope), ()):
            if bound == name and offset <= node.start_byte:
                return True
        if scope.type in _HARD_SCOPE_TYPES:
            return False
        scope = _enclosing_scope(scope)
    return False


def _enclosing_scope(node: Any) -> Any | None:
    current = node.parent
    while current is not None and current.type not in _SCOPE_TYPES:
        current = current.parent
    return current


def _identifiers(node: Any) -> Iterator[Any]:
    return (n for n in _walk(node) if n.type == "identifier")


def _walk(node: Any) -> Iterator[Any]:
    """Pre-order traversal without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _key(node: Any) -> NodeKey:
    return (node.start_byte, node.end_byte, node.type)


def _same(a: Any | None, b: Any) -> bool:
    return a is not None and _key(a) == _key(b)


def _text(node: Any, data: bytes) -> str:
    return data[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def accepted_calls(
    filename: str,
    source: bytes | str,
    accept: Callable[[str], bool],
) -> list[HelperCall]:
    """Extract helper calls from Ruby ``source`` and keep the accepted ones."""
    return [
        HelperCall(filename=filename, line=line, name=name)
        for name, line in extract_helper_calls(source)
        if accept(name)
    ]
