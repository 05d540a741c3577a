"""Read a function definition into a `FunctionDescriptor`.

Nothing is validated here: names, annotations, decorators and the body are
copied as they are so the generator can re-emit them unchanged.
"""

import ast
import inspect
import typing
from typing import Callable, Iterable, List, Optional, Union

from tracefn_core.models import FunctionDescriptor, Parameter

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]

RECEIVERS = ('self', 'cls')


def extract_signature(
    node: FunctionNode,
    marker: Optional[ast.expr] = None,
    in_class: bool = False,
    filename: str = '<unknown>',
) -> FunctionDescriptor:
    """Describe a function definition read from source.

    Parameters
    ----------
    node : ast.FunctionDef | ast.AsyncFunctionDef
        The annotated function.
    marker : ast.expr, optional
        The instrumentation marker, left out of the re-emitted decorators.
    in_class : bool, optional
        Whether the function is defined directly in a class body, in which
        case a leading `self`/`cls` parameter is the receiver.
    filename : str, optional
        Source file reported in entry events.

    Returns
    -------
    FunctionDescriptor
    """
    body = list(node.body)
    docstring = None
    if ast.get_docstring(node, clean=False) is not None:
        docstring = body.pop(0)

    return FunctionDescriptor(
        name=node.name,
        visibility=visibility_of(node.name),
        is_async=isinstance(node, ast.AsyncFunctionDef),
        is_generator=contains_yield(node.body),
        arguments=node.args,
        parameters=tuple(_loggable_parameters(node.args, in_class)),
        returns=node.returns,
        body=tuple(body),
        docstring=docstring,
        decorators=tuple(
            decorator for decorator in node.decorator_list if decorator is not marker
        ),
        type_params=tuple(getattr(node, 'type_params', ())),
        filename=filename,
        lineno=node.lineno,
    )


def describe_function(func: Callable) -> FunctionDescriptor:
    """Describe a live function, as seen by the decorator applied at import time."""
    try:
        hints = typing.get_type_hints(func)
    except Exception:
        # Unresolvable forward references: fall back to the raw annotations
        hints = dict(getattr(func, '__annotations__', {}))

    signature = inspect.signature(func)
    parameters = []
    for index, parameter in enumerate(signature.parameters.values()):
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        if index == 0 and parameter.name in RECEIVERS and _is_method(func):
            continue
        parameters.append(
            Parameter(name=parameter.name, annotation=hints.get(parameter.name))
        )

    code = func.__code__
    return FunctionDescriptor(
        name=func.__name__,
        visibility=visibility_of(func.__name__),
        is_async=inspect.iscoroutinefunction(func) or inspect.isasyncgenfunction(func),
        is_generator=inspect.isgeneratorfunction(func) or inspect.isasyncgenfunction(func),
        parameters=tuple(parameters),
        returns=hints.get('return'),
        filename=code.co_filename,
        lineno=code.co_firstlineno,
    )


def visibility_of(name: str) -> str:
    if name.startswith('_') and not name.endswith('__'):
        return 'private'
    return 'public'


def contains_yield(body: Iterable[ast.stmt]) -> bool:
    """Whether the statements yield, ignoring nested functions, lambdas and classes."""
    pending: List[ast.AST] = list(body)
    while pending:
        node = pending.pop()
        if isinstance(node, (ast.Yield, ast.YieldFrom)):
            return True
        if isinstance(
            node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)
        ):
            continue
        pending.extend(ast.iter_child_nodes(node))
    return False


def _loggable_parameters(arguments: ast.arguments, in_class: bool) -> List[Parameter]:
    positional = arguments.posonlyargs + arguments.args
    if in_class and positional and positional[0].arg in RECEIVERS:
        positional = positional[1:]

    return [
        Parameter(name=argument.arg, annotation=argument.annotation)
        for argument in positional + arguments.kwonlyargs
    ]


def _is_method(func: Callable) -> bool:
    parts = func.__qualname__.split('.')
    return len(parts) > 1 and parts[-2] != '<locals>'
