"""Parse the option list attached to the instrumentation marker.

The parser is lenient on purpose: fragments without `=` and unknown keys are
dropped, and nothing it reads ever raises. Validation of the level happens
later, when the replacement function is generated.
"""

import ast
from typing import Any, List

from tracefn_core.models import AnnotationOptions

QUOTES = ('"', "'")


def parse_annotation(text: str) -> AnnotationOptions:
    """Parse raw option text such as `level = "info", skip = "password"`.

    Parameters
    ----------
    text : str
        The text between the parentheses of the marker, possibly empty.

    Returns
    -------
    AnnotationOptions
        The parsed options, defaults for anything missing or malformed.

    Example
    -------
    >>> parse_annotation('level=info, garbage, force=true')
    AnnotationOptions(level='info', skip=frozenset(), force=True)
    """
    level = 'trace'
    skip = frozenset()
    force = False

    for fragment in _split_fragments(text or ''):
        fragment = fragment.strip()
        key, separator, value = fragment.partition('=')
        if not separator:
            continue

        key = key.strip()
        value = _unquote(value.strip())

        if key == 'level':
            level = value
        elif key == 'skip':
            skip = frozenset(name.strip() for name in value.split(','))
        elif key == 'force':
            force = value == 'true'

    return AnnotationOptions(level=level, skip=skip, force=force)


def render_options(*args: Any, **kwargs: Any) -> str:
    """Render decorator arguments as the option text `parse_annotation` reads.

    Accepts live values (the decorator applied at import time) or AST nodes
    (the marker read from source). Booleans become the `true`/`false` literals
    and strings are double quoted; positional arguments have no key and are
    therefore ignored by the parser.
    """
    fragments = [_render_value(arg) for arg in args]
    fragments += [f'{key}={_render_value(value)}' for key, value in kwargs.items()]
    return ', '.join(fragments)


def render_call_options(decorator: ast.expr) -> str:
    """Render the options of a marker read from source (`@trace_fn` or `@trace_fn(...)`)."""
    if not isinstance(decorator, ast.Call):
        return ''

    fragments = [_render_value(arg) for arg in decorator.args]
    for keyword in decorator.keywords:
        if keyword.arg is None:
            fragments.append(f'**{ast.unparse(keyword.value)}')
        else:
            fragments.append(f'{keyword.arg}={_render_value(keyword.value)}')
    return ', '.join(fragments)


def _render_value(value: Any) -> str:
    if isinstance(value, ast.Constant):
        value = value.value
    elif isinstance(value, ast.Name):
        return value.id
    elif isinstance(value, ast.AST):
        return ast.unparse(value)

    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def _split_fragments(text: str) -> List[str]:
    """Split on commas that are not inside a quoted value."""
    fragments = []
    current = []
    quote = None

    for char in text:
        if quote is not None:
            if char == quote:
                quote = None
        elif char in QUOTES:
            quote = char
        elif char == ',':
            fragments.append(''.join(current))
            current = []
            continue
        current.append(char)

    fragments.append(''.join(current))
    return fragments


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value
