"""Find marked functions in a module and replace them with generated definitions."""

import ast
import logging
from typing import Iterable, List, Optional, Union

from tracefn_core.exceptions import SourceParseException
from tracefn_core.logging import create_null_logger
from tracefn_core.models import GeneratedFunction, TransformResult
from tracefn_core.transform.annotation_parser import parse_annotation, render_call_options
from tracefn_core.transform.argument_formatter import format_arguments
from tracefn_core.transform.capabilities import StaticCapabilityChecker
from tracefn_core.transform.code_generator import RUNTIME_ALIAS, generate_function
from tracefn_core.transform.signature_extractor import extract_signature

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


class TraceFnTransformer(ast.NodeTransformer):
    """Rewrite every function carrying the instrumentation marker.

    Attributes
    ----------
    generated : list of GeneratedFunction
        One record per marked function, in the order they were rewritten
        (inner functions before the functions enclosing them).
    """

    def __init__(
        self,
        filename: str,
        instrumented: bool,
        markers: Iterable[str] = ('trace_fn',),
        checker: Optional[StaticCapabilityChecker] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.filename = filename
        self.instrumented = instrumented
        self.markers = set(markers)
        self.checker = checker or StaticCapabilityChecker()
        self.logger = logger or create_null_logger('tracefn.transform')
        self.generated: List[GeneratedFunction] = []
        self._scopes: List[ast.AST] = []

    def visit_ClassDef(self, node: ast.ClassDef) -> ast.AST:
        self._scopes.append(node)
        self.generic_visit(node)
        self._scopes.pop()
        return node

    def visit_FunctionDef(self, node: ast.FunctionDef) -> ast.AST:
        return self._visit_function(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> ast.AST:
        return self._visit_function(node)

    def _visit_function(self, node: FunctionNode) -> ast.AST:
        in_class = bool(self._scopes) and isinstance(self._scopes[-1], ast.ClassDef)

        self._scopes.append(node)
        self.generic_visit(node)
        self._scopes.pop()

        marker = self._find_marker(node)
        if marker is None:
            return node

        options = parse_annotation(render_call_options(marker))
        descriptor = extract_signature(
            node, marker=marker, in_class=in_class, filename=self.filename
        )
        # Elided functions never print their arguments or result
        checker = self.checker if options.force or self.instrumented else None
        arguments = format_arguments(
            descriptor.parameters,
            skip=options.skip,
            checker=checker,
            function=descriptor.name,
        )
        generated = generate_function(
            options,
            descriptor,
            arguments,
            instrumented=self.instrumented,
            checker=checker,
        )

        self.logger.debug(
            f'[{descriptor.name}] at {self.filename}:{descriptor.lineno} '
            f'{generated.mode} (level={generated.level.value}, '
            f'args={len(arguments)}, skipped={len(options.skip)})'
        )

        self.generated.append(generated)
        return ast.copy_location(generated.node, node)

    def _find_marker(self, node: FunctionNode) -> Optional[ast.expr]:
        for decorator in node.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            if isinstance(target, ast.Name) and target.id in self.markers:
                return decorator
            if isinstance(target, ast.Attribute) and target.attr in self.markers:
                return decorator
        return None


def transform_source(
    source: str,
    filename: str = '<string>',
    instrumented: bool = True,
    marker: str = 'trace_fn',
    opaque_types: Iterable[str] = (),
    logger: Optional[logging.Logger] = None,
) -> TransformResult:
    """Transform the source of a module.

    Parameters
    ----------
    source : str
        The module source.
    filename : str, optional
        Reported in entry events and diagnostics.
    instrumented : bool, optional
        Whether the build profile keeps non-forced instrumentation.
    marker : str, optional
        Decorator name marking functions to instrument.
    opaque_types : Iterable[str], optional
        Extra annotation names without a debug representation.
    logger : logging.Logger, optional
        Receives one debug line per rewritten function.

    Returns
    -------
    TransformResult
        The rewritten module source and one record per marked function.
        A module without marked functions is returned unchanged.

    Raises
    ------
    SourceParseException
        If the source is not valid Python.
    GenerationException
        If a marked function cannot be generated.
    """
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as ex:
        raise SourceParseException(ex, filename) from ex

    checker = StaticCapabilityChecker(
        StaticCapabilityChecker.collect_opaque_classes(tree) | set(opaque_types)
    )
    transformer = TraceFnTransformer(
        filename=filename,
        instrumented=instrumented,
        markers=[marker],
        checker=checker,
        logger=logger,
    )
    tree = transformer.visit(tree)

    if not transformer.generated:
        return TransformResult(source=source)

    if any(function.instrumented for function in transformer.generated):
        _insert_runtime_import(tree)

    ast.fix_missing_locations(tree)
    return TransformResult(source=ast.unparse(tree) + '\n', functions=transformer.generated)


def _insert_runtime_import(tree: ast.Module) -> None:
    """Import the runtime after the module docstring and `__future__` imports."""
    position = 0
    if ast.get_docstring(tree, clean=False) is not None:
        position = 1
    while (
        position < len(tree.body)
        and isinstance(tree.body[position], ast.ImportFrom)
        and tree.body[position].module == '__future__'
    ):
        position += 1

    statement = ast.parse(f'import tracefn_core.runtime as {RUNTIME_ALIAS}').body[0]
    tree.body.insert(position, statement)
