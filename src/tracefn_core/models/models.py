import ast
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from tracefn_core.logging import TRACE

REDACTED = '***'
"""Marker rendered in place of a skipped argument value."""


class Profile(str, Enum):
    """Build profiles."""

    DEBUG = 'debug'
    RELEASE = 'release'


class Level(str, Enum):
    """Severity levels an instrumented function can emit its events at."""

    TRACE = 'TRACE'
    DEBUG = 'DEBUG'
    INFO = 'INFO'
    WARN = 'WARN'
    ERROR = 'ERROR'

    @property
    def logging_level(self) -> int:
        return {
            Level.TRACE: TRACE,
            Level.DEBUG: logging.DEBUG,
            Level.INFO: logging.INFO,
            Level.WARN: logging.WARNING,
            Level.ERROR: logging.ERROR,
        }[self]


class AnnotationOptions(BaseModel):
    """Options attached to the instrumentation marker of a function."""

    model_config = ConfigDict(frozen=True)

    level: str = 'trace'
    skip: FrozenSet[str] = frozenset()
    force: bool = False


class Parameter(BaseModel):
    """A parameter bound to a single identifier."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    annotation: Any = None
    """The annotation, as an AST expression when read from source or as a type when read from a live function."""


class FunctionDescriptor(BaseModel):
    """Everything read from a function definition before it is rewritten.

    Attributes
    ----------
    name : str
        The function name.
    visibility : str
        `public`, or `private` for names with a single leading underscore.
    is_async : bool
        Whether the function is a coroutine function.
    is_generator : bool
        Whether the body yields.
    arguments : ast.arguments | None
        The complete parameter list, re-emitted verbatim.
    parameters : tuple of Parameter
        The subset of parameters that can be logged, in declaration order.
    returns : Any
        The return annotation.
    body : list of ast.stmt
        The original body, docstring excluded.
    docstring : ast.stmt | None
        The docstring statement, kept on the outer function.
    decorators : list of ast.expr
        Decorators other than the instrumentation marker, in original order.
    type_params : list of ast.AST
        PEP 695 type parameters, when the interpreter supports them.
    filename : str
        The source file, as reported in entry events.
    lineno : int
        The line of the `def` statement.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    visibility: str = 'public'
    is_async: bool = False
    is_generator: bool = False
    arguments: Optional[ast.arguments] = None
    parameters: Tuple[Parameter, ...] = ()
    returns: Any = None
    body: Tuple[ast.stmt, ...] = ()
    docstring: Optional[ast.stmt] = None
    decorators: Tuple[ast.expr, ...] = ()
    type_params: Tuple[Any, ...] = ()
    filename: str = '<unknown>'
    lineno: int = 0


class ArgumentDisplay(BaseModel):
    """How a single loggable argument shows up in the entry event."""

    model_config = ConfigDict(frozen=True)

    name: str
    redacted: bool = False

    def render(self, value: Any) -> str:
        """Render the fragment for a runtime value."""
        return f'{self.name}={self.rendered_value(value)}'

    def rendered_value(self, value: Any) -> str:
        if self.redacted:
            return REDACTED
        return repr(value)

    def expression(self) -> str:
        """Python expression producing the same fragment inside generated code."""
        if self.redacted:
            return repr(f'{self.name}={REDACTED}')
        return "f'" + self.name + '={' + self.name + "!r}'"


class GeneratedFunction(BaseModel):
    """The definition that replaces an annotated function."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    lineno: int
    level: Level
    forced: bool
    instrumented: bool
    node: ast.stmt

    @property
    def mode(self) -> str:
        if not self.instrumented:
            return 'elided'
        return 'forced' if self.forced else 'conditional'

    @property
    def source(self) -> str:
        return ast.unparse(self.node)


@dataclass
class TransformResult:
    """Outcome of transforming a single module."""

    source: str
    functions: List[GeneratedFunction] = field(default_factory=list)

    @property
    def instrumented(self) -> List[GeneratedFunction]:
        return [function for function in self.functions if function.instrumented]


@dataclass
class BuildTask:
    """A source file to transform and, optionally, where to write the result.

    Attributes
    ----------
    source : Path
        The Python file to transform
    target : Path | None
        Destination of the transformed module. If None, nothing is written
    """

    source: Path
    target: Optional[Path] = None


@dataclass
class BuildResult:
    """Result of a single build task.

    Attributes
    ----------
    task : BuildTask
        The task that was processed
    result : TransformResult | None
        The transformed module, or None if an error occurred
    error : str | None
        Error message if the transformation failed, None otherwise
    exception : Exception | None
        The original exception if the transformation failed, None otherwise
    """

    task: BuildTask
    result: Optional[TransformResult]
    error: Optional[str]
    exception: Optional[Exception] = None

    @property
    def success(self) -> bool:
        """Return True if the transformation succeeded."""
        return self.result is not None

    @property
    def failed(self) -> bool:
        """Return True if the transformation failed."""
        return self.error is not None
