from typing import Any, Iterable, List, Mapping, Optional

from tracefn_core.exceptions import NotDebugPrintableException
from tracefn_core.models import ArgumentDisplay, Parameter


def format_arguments(
    parameters: Iterable[Parameter],
    skip: Iterable[str] = (),
    checker: Optional[Any] = None,
    function: str = '<unknown>',
) -> List[ArgumentDisplay]:
    """Build the ordered display list for the loggable parameters.

    Parameters
    ----------
    parameters : Iterable[Parameter]
        The loggable parameters, in declaration order.
    skip : Iterable[str], optional
        Names whose value is replaced by the redaction marker.
    checker : optional
        A capability checker; when given, every parameter that is not skipped
        must have a debug-printable annotation.
    function : str, optional
        Function name used in diagnostics.

    Raises
    ------
    NotDebugPrintableException
        If a parameter that is not skipped has an opaque type.
    """
    skip = set(skip)
    displays = []

    for parameter in parameters:
        redacted = parameter.name in skip
        if not redacted and checker is not None:
            type_name = checker.missing(parameter.annotation)
            if type_name:
                raise NotDebugPrintableException(
                    target=parameter.name, type_name=type_name, function=function
                )
        displays.append(ArgumentDisplay(name=parameter.name, redacted=redacted))

    return displays


def render_arguments(
    displays: Iterable[ArgumentDisplay], values: Mapping[str, Any]
) -> str:
    """Render the argument string of an entry event from bound values."""
    return join_arguments(
        display.render(values[display.name])
        for display in displays
        if display.name in values
    )


def arguments_expression(displays: Iterable[ArgumentDisplay]) -> str:
    """Python expression evaluating to the argument string inside generated code."""
    fragments = [display.expression() for display in displays]
    if not fragments:
        return repr(join_arguments([]))
    return "', '.join([" + ', '.join(fragments) + '])'


def join_arguments(fragments: Iterable[str]) -> str:
    fragments = list(fragments)
    if not fragments:
        return '()'
    return ', '.join(fragments)
