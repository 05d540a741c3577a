"""Build the definition that replaces an annotated function.

The instrumented shape emits the entry event, runs the original body as a
nested function receiving the same parameters, times that call, emits the
exit event and returns the captured result:

    def add(a: int, b: int) -> int:
        _tracefn_runtime.enter(__name__, 'TRACE', 'add', ', '.join([f'a={a!r}', f'b={b!r}']), 'calc.py', 4)

        def _tracefn_body(a, b):
            return a + b
        _tracefn_start = _tracefn_runtime.clock()
        _tracefn_result = _tracefn_body(a, b)
        _tracefn_duration = _tracefn_runtime.clock() - _tracefn_start
        _tracefn_runtime.leave(__name__, 'TRACE', 'add', _tracefn_result, _tracefn_duration)
        return _tracefn_result

When the profile is not instrumented and the marker is not forced, the
original definition is re-emitted with only the marker removed.
"""

import ast
import copy
from typing import Any, List, Optional, Sequence

from tracefn_core.exceptions import (
    NotDebugPrintableException,
    UndefinedLevelException,
    UnsupportedFunctionException,
)
from tracefn_core.models import (
    AnnotationOptions,
    ArgumentDisplay,
    FunctionDescriptor,
    GeneratedFunction,
    Level,
)
from tracefn_core.transform.argument_formatter import arguments_expression

RUNTIME_ALIAS = '_tracefn_runtime'
BODY_NAME = '_tracefn_body'


def resolve_level(level: str, function: str = '<unknown>') -> Level:
    """Match a level name, case-insensitively, against the supported severities.

    Raises
    ------
    UndefinedLevelException
        If the name is not one of TRACE, DEBUG, INFO, WARN, ERROR.
    """
    try:
        return Level(level.upper())
    except ValueError:
        raise UndefinedLevelException(level=level, function=function) from None


def generate_function(
    options: AnnotationOptions,
    descriptor: FunctionDescriptor,
    arguments: Sequence[ArgumentDisplay],
    instrumented: bool,
    checker: Optional[Any] = None,
) -> GeneratedFunction:
    """Generate the replacement definition of an annotated function.

    Parameters
    ----------
    options : AnnotationOptions
        Parsed marker options.
    descriptor : FunctionDescriptor
        The function as read from source.
    arguments : Sequence[ArgumentDisplay]
        Display list produced by the argument formatter.
    instrumented : bool
        Whether the build profile keeps non-forced instrumentation.
    checker : optional
        Capability checker applied to the return annotation.

    Returns
    -------
    GeneratedFunction

    Raises
    ------
    UndefinedLevelException
        If the level is not a supported severity.
    NotDebugPrintableException
        If the return annotation of an instrumented function has no debug
        representation.
    UnsupportedFunctionException
        If an async generator would need instrumentation.
    """
    details = {'file': descriptor.filename, 'line': descriptor.lineno}
    level = resolve_level(options.level, descriptor.name)
    active = options.force or instrumented

    if active and checker is not None:
        type_name = checker.missing(descriptor.returns)
        if type_name:
            raise NotDebugPrintableException(
                target='return',
                type_name=type_name,
                function=descriptor.name,
                details=details,
            )

    if active and descriptor.is_async and descriptor.is_generator:
        raise UnsupportedFunctionException(
            message='Async generators have no return value to capture',
            function=descriptor.name,
            details=details,
        )

    head = [descriptor.docstring] if descriptor.docstring is not None else []
    if active:
        body = head + _instrumented_body(level, descriptor, arguments)
    else:
        body = head + list(descriptor.body)
    if not body:
        body = [ast.Pass()]

    node_class = ast.AsyncFunctionDef if descriptor.is_async else ast.FunctionDef
    fields = dict(
        name=descriptor.name,
        args=descriptor.arguments,
        body=body,
        decorator_list=list(descriptor.decorators),
        returns=descriptor.returns,
        type_comment=None,
        lineno=descriptor.lineno,
        col_offset=0,
    )
    if 'type_params' in node_class._fields:
        fields['type_params'] = list(descriptor.type_params)

    return GeneratedFunction(
        name=descriptor.name,
        lineno=descriptor.lineno,
        level=level,
        forced=options.force,
        instrumented=active,
        node=node_class(**fields),
    )


def _instrumented_body(
    level: Level,
    descriptor: FunctionDescriptor,
    arguments: Sequence[ArgumentDisplay],
) -> List[ast.stmt]:
    name = descriptor.name
    entry = _statements(
        f'{RUNTIME_ALIAS}.enter(__name__, {level.value!r}, {name!r}, '
        f'{arguments_expression(arguments)}, {descriptor.filename!r}, {descriptor.lineno})'
    )

    call = _body_call(descriptor.arguments)
    if descriptor.is_async:
        call = ast.Await(value=call)
    elif descriptor.is_generator:
        call = ast.YieldFrom(value=call)

    timed = _statements(f'_tracefn_start = {RUNTIME_ALIAS}.clock()')
    timed.append(
        ast.Assign(targets=[ast.Name(id='_tracefn_result', ctx=ast.Store())], value=call)
    )
    timed += _statements(
        f'_tracefn_duration = {RUNTIME_ALIAS}.clock() - _tracefn_start\n'
        f'{RUNTIME_ALIAS}.leave(__name__, {level.value!r}, {name!r}, _tracefn_result, _tracefn_duration)\n'
        'return _tracefn_result'
    )

    return entry + [_body_function(descriptor)] + timed


def _body_function(descriptor: FunctionDescriptor) -> ast.stmt:
    """The original body as a nested function with the outer parameters, minus defaults and annotations."""
    arguments = copy.deepcopy(descriptor.arguments) or ast.arguments(
        posonlyargs=[], args=[], vararg=None, kwonlyargs=[], kw_defaults=[], kwarg=None, defaults=[]
    )
    arguments.defaults = []
    arguments.kw_defaults = [None] * len(arguments.kwonlyargs)
    for argument in _all_arguments(arguments):
        argument.annotation = None

    node_class = ast.AsyncFunctionDef if descriptor.is_async else ast.FunctionDef
    fields = dict(
        name=BODY_NAME,
        args=arguments,
        body=list(descriptor.body) or [ast.Pass()],
        decorator_list=[],
        returns=None,
        type_comment=None,
    )
    if 'type_params' in node_class._fields:
        fields['type_params'] = []
    return node_class(**fields)


def _body_call(arguments: Optional[ast.arguments]) -> ast.Call:
    positional: List[ast.expr] = []
    keywords: List[ast.keyword] = []

    if arguments is not None:
        positional = [
            ast.Name(id=argument.arg, ctx=ast.Load())
            for argument in arguments.posonlyargs + arguments.args
        ]
        if arguments.vararg is not None:
            positional.append(
                ast.Starred(value=ast.Name(id=arguments.vararg.arg, ctx=ast.Load()), ctx=ast.Load())
            )
        keywords = [
            ast.keyword(arg=argument.arg, value=ast.Name(id=argument.arg, ctx=ast.Load()))
            for argument in arguments.kwonlyargs
        ]
        if arguments.kwarg is not None:
            keywords.append(
                ast.keyword(arg=None, value=ast.Name(id=arguments.kwarg.arg, ctx=ast.Load()))
            )

    return ast.Call(func=ast.Name(id=BODY_NAME, ctx=ast.Load()), args=positional, keywords=keywords)


def _all_arguments(arguments: ast.arguments) -> List[ast.arg]:
    found = arguments.posonlyargs + arguments.args + arguments.kwonlyargs
    found += [argument for argument in (arguments.vararg, arguments.kwarg) if argument]
    return found


def _statements(source: str) -> List[ast.stmt]:
    return ast.parse(source).body
