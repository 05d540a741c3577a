"""The `@trace_fn` marker, usable without a build step.

When a module is transformed by `tracefn build` the marker is removed from the
output and never runs. When the module is imported as written, the marker runs
the same pipeline against the live function once, at decoration time:

    @trace_fn
    def add(a: int, b: int) -> int:
        return a + b

    @trace_fn(level="info", skip="password", force=True)
    def login(username: str, password: str) -> bool:
        ...

Outside the instrumented profile, and without `force`, the function object is
returned as is, so there is no wrapper to pay for.
"""

import functools
import inspect
from typing import Any, Callable, Optional, ParamSpec, TypeVar

from tracefn_core import runtime
from tracefn_core.models import TraceFnConfig
from tracefn_core.transform.annotation_parser import parse_annotation, render_options
from tracefn_core.transform.argument_formatter import format_arguments, render_arguments
from tracefn_core.transform.capabilities import RuntimeCapabilityChecker
from tracefn_core.transform.code_generator import generate_function
from tracefn_core.transform.signature_extractor import describe_function

P = ParamSpec('P')
T = TypeVar('T')

_config: Optional[TraceFnConfig] = None


def get_config() -> TraceFnConfig:
    """Configuration read by the decorator, loaded on first use."""
    global _config
    if _config is None:
        _config = TraceFnConfig()
    return _config


def configure(config: Optional[TraceFnConfig]) -> None:
    """Replace the decorator configuration. Pass None to reload it from the environment.

    Only functions decorated afterwards are affected.
    """
    global _config
    _config = config


def trace_fn(
    func: Callable[P, T] | Any = None, *args: Any, **options: Any
) -> Callable[P, T] | Callable[[Callable[P, T]], Callable[P, T]]:
    """Instrument a function with entry and exit events.

    Can be used with or without arguments:
        @trace_fn
        def func(): ...

        @trace_fn(level="debug", skip="token")
        def func(token): ...

    Args:
        func: The function to decorate (when used without parentheses)
        level: Severity of the events, one of trace, debug, info, warn, error
        skip: Comma separated parameter names whose values are redacted
        force: Keep the instrumentation in the release profile

    Unknown options and positional arguments are ignored.

    Raises:
        GenerationException: at decoration time, for an undefined level or a
            logged type without a debug representation
    """
    if func is not None and not callable(func):
        args = (func,) + args
        func = None

    text = render_options(*args, **options)

    def decorator(fn: Callable[P, T]) -> Callable[P, T]:
        return _instrument(fn, text)

    if func is not None:
        return decorator(func)
    return decorator


def _instrument(fn: Callable[P, T], text: str) -> Callable[P, T]:
    options = parse_annotation(text)
    descriptor = describe_function(fn)
    instrumented = get_config().instrumented
    checker = RuntimeCapabilityChecker() if options.force or instrumented else None
    displays = format_arguments(
        descriptor.parameters,
        skip=options.skip,
        checker=checker,
        function=descriptor.name,
    )
    generated = generate_function(
        options,
        descriptor,
        displays,
        instrumented=instrumented,
        checker=checker,
    )

    if not generated.instrumented:
        return fn

    signature = inspect.signature(fn)
    logger_name = fn.__module__
    level = generated.level.value
    name = descriptor.name

    def enter(args: tuple, kwargs: dict) -> bool:
        """Emit the entry event. False when the call does not match the signature."""
        try:
            bound = signature.bind(*args, **kwargs)
        except TypeError:
            return False
        bound.apply_defaults()
        runtime.enter(
            logger_name,
            level,
            name,
            render_arguments(displays, bound.arguments),
            descriptor.filename,
            descriptor.lineno,
        )
        return True

    if descriptor.is_async:

        @functools.wraps(fn)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            if not enter(args, kwargs):
                # Let the function report the mismatch in its own words
                return await fn(*args, **kwargs)
            start = runtime.clock()
            result = await fn(*args, **kwargs)
            runtime.leave(logger_name, level, name, result, runtime.clock() - start)
            return result

        return async_wrapper

    if descriptor.is_generator:

        @functools.wraps(fn)
        def generator_wrapper(*args: P.args, **kwargs: P.kwargs):
            if not enter(args, kwargs):
                return (yield from fn(*args, **kwargs))
            start = runtime.clock()
            result = yield from fn(*args, **kwargs)
            runtime.leave(logger_name, level, name, result, runtime.clock() - start)
            return result

        return generator_wrapper

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        if not enter(args, kwargs):
            return fn(*args, **kwargs)
        start = runtime.clock()
        result = fn(*args, **kwargs)
        runtime.leave(logger_name, level, name, result, runtime.clock() - start)
        return result

    return wrapper
