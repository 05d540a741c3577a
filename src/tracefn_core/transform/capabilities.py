"""Decide whether a type has a debug representation worth logging.

A type qualifies when its `repr` is more than the inherited
`object.__repr__` default (`<Foo object at 0x...>`). Two checkers share the
same interface: one reads annotations from source, the other inspects live
types.
"""

import ast
import inspect
import typing
from typing import Any, Iterable, Optional, Set


class StaticCapabilityChecker:
    """Check annotations read from source against a set of opaque class names.

    Parameters
    ----------
    opaque_types : Iterable[str]
        Names of classes known to lack a custom `__repr__`.
    """

    def __init__(self, opaque_types: Iterable[str] = ()):
        self.opaque_types: Set[str] = set(opaque_types)

    def missing(self, annotation: Any) -> Optional[str]:
        """Return the first opaque type name found in the annotation, if any."""
        if annotation is None:
            return None

        if isinstance(annotation, str):
            try:
                annotation = ast.parse(annotation, mode='eval').body
            except SyntaxError:
                return None

        if isinstance(annotation, ast.Name):
            return annotation.id if annotation.id in self.opaque_types else None
        if isinstance(annotation, ast.Attribute):
            return annotation.attr if annotation.attr in self.opaque_types else None
        if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
            return self.missing(annotation.value)
        if isinstance(annotation, ast.Subscript):
            # type[Foo] values are classes and Literal arguments are values
            if _name_of(annotation.value) in ('type', 'Type', 'Literal'):
                return None
            return self.missing(annotation.value) or self.missing(annotation.slice)
        if isinstance(annotation, (ast.Tuple, ast.List)):
            for element in annotation.elts:
                found = self.missing(element)
                if found:
                    return found
            return None
        if isinstance(annotation, ast.BinOp):
            return self.missing(annotation.left) or self.missing(annotation.right)
        return None

    @staticmethod
    def collect_opaque_classes(tree: ast.Module) -> Set[str]:
        """Module level classes with no `__repr__`, no decorators and no base other than `object`.

        Decorated classes (dataclasses, attrs) and subclasses may inherit a
        representation, so they are given the benefit of the doubt.
        """
        names = set()
        for node in tree.body:
            if not isinstance(node, ast.ClassDef) or node.decorator_list:
                continue
            if any(
                not (isinstance(base, ast.Name) and base.id == 'object')
                for base in node.bases
            ):
                continue
            if node.keywords:
                continue
            defines_repr = any(
                isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef))
                and item.name == '__repr__'
                for item in node.body
            )
            if not defines_repr:
                names.add(node.name)
        return names


class RuntimeCapabilityChecker:
    """Check live types, as resolved from a function's annotations."""

    def missing(self, annotation: Any) -> Optional[str]:
        if annotation is None or annotation is typing.Any:
            return None
        if isinstance(annotation, (str, typing.TypeVar)):
            return None

        origin = typing.get_origin(annotation)
        if origin is type:
            return None
        if origin is not None:
            for argument in typing.get_args(annotation):
                found = self.missing(argument)
                if found:
                    return found
            return None

        if not inspect.isclass(annotation) or annotation is object:
            return None
        if inspect.isabstract(annotation) or getattr(annotation, '_is_protocol', False):
            return None
        if annotation.__repr__ is object.__repr__:
            return annotation.__qualname__
        return None


def _name_of(node: ast.expr) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None
