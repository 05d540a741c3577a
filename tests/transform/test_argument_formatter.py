import ast
from dataclasses import dataclass

import pytest

from tracefn_core.exceptions import NotDebugPrintableException
from tracefn_core.models import ArgumentDisplay, Parameter
from tracefn_core.transform.argument_formatter import (
    arguments_expression,
    format_arguments,
    join_arguments,
    render_arguments,
)
from tracefn_core.transform.capabilities import (
    RuntimeCapabilityChecker,
    StaticCapabilityChecker,
)


class Opaque:
    pass


@dataclass
class Point:
    x: int
    y: int


def parameters(*names):
    return [Parameter(name=name) for name in names]


class TestFormatArguments:
    def test_declaration_order_is_kept(self):
        displays = format_arguments(parameters('b', 'a', 'c'))

        assert [display.name for display in displays] == ['b', 'a', 'c']

    def test_skipped_parameters_are_redacted(self):
        displays = format_arguments(parameters('username', 'password'), skip={'password'})

        assert displays == [
            ArgumentDisplay(name='username', redacted=False),
            ArgumentDisplay(name='password', redacted=True),
        ]

    def test_skip_names_that_do_not_exist_are_harmless(self):
        displays = format_arguments(parameters('a'), skip={'missing'})

        assert displays == [ArgumentDisplay(name='a')]

    def test_opaque_parameter_fails(self):
        with pytest.raises(NotDebugPrintableException) as excinfo:
            format_arguments(
                [Parameter(name='conn', annotation=Opaque)],
                checker=RuntimeCapabilityChecker(),
                function='query',
            )

        assert excinfo.value.target == 'conn'
        assert 'Parameter [conn] of type [Opaque]' in str(excinfo.value)
        assert 'Cannot instrument [query]' in str(excinfo.value)

    def test_opaque_parameter_can_be_skipped(self):
        displays = format_arguments(
            [Parameter(name='conn', annotation=Opaque)],
            skip={'conn'},
            checker=RuntimeCapabilityChecker(),
        )

        assert displays == [ArgumentDisplay(name='conn', redacted=True)]


class TestRenderArguments:
    def test_no_arguments(self):
        assert render_arguments([], {}) == '()'

    def test_values_are_rendered_with_repr(self):
        displays = format_arguments(parameters('a', 'b'))

        assert render_arguments(displays, {'a': 2, 'b': 3}) == 'a=2, b=3'

    def test_skipped_value_never_appears(self):
        displays = format_arguments(parameters('username', 'password'), skip={'password'})

        rendered = render_arguments(displays, {'username': 'u', 'password': 'p'})

        assert rendered == "username='u', password=***"

    def test_join(self):
        assert join_arguments([]) == '()'
        assert join_arguments(['a=1']) == 'a=1'
        assert join_arguments(['a=1', 'b=2']) == 'a=1, b=2'


class TestArgumentsExpression:
    def test_empty_expression_is_parens(self):
        assert eval(arguments_expression([])) == '()'

    def test_expression_matches_runtime_rendering(self):
        displays = format_arguments(parameters('username', 'password'), skip={'password'})

        expression = arguments_expression(displays)
        ast.parse(expression, mode='eval')

        assert eval(expression, {}, {'username': 'u', 'password': 'p'}) == (
            "username='u', password=***"
        )


class TestCapabilities:
    def test_runtime_checker(self):
        checker = RuntimeCapabilityChecker()

        assert checker.missing(int) is None
        assert checker.missing(Point) is None
        assert checker.missing(object) is None
        assert checker.missing(None) is None
        assert checker.missing(Opaque) == 'Opaque'
        assert checker.missing(list[Opaque]) == 'Opaque'
        assert checker.missing(Opaque | None) == 'Opaque'
        assert checker.missing(type[Opaque]) is None

    def test_static_checker(self):
        checker = StaticCapabilityChecker({'Opaque'})

        def annotation(source):
            return ast.parse(source, mode='eval').body

        assert checker.missing(None) is None
        assert checker.missing(annotation('int')) is None
        assert checker.missing(annotation('Opaque')) == 'Opaque'
        assert checker.missing(annotation('models.Opaque')) == 'Opaque'
        assert checker.missing(annotation('dict[str, Opaque]')) == 'Opaque'
        assert checker.missing(annotation('Opaque | None')) == 'Opaque'
        assert checker.missing(annotation("'Opaque'")) == 'Opaque'
        assert checker.missing(annotation('type[Opaque]')) is None

    def test_collect_opaque_classes(self):
        tree = ast.parse(
            'class Plain: pass\n'
            'class WithRepr:\n'
            '    def __repr__(self): return "x"\n'
            '@dataclass\n'
            'class Data: pass\n'
            'class Child(Base): pass\n'
            'class Explicit(object): pass\n'
        )

        assert StaticCapabilityChecker.collect_opaque_classes(tree) == {'Plain', 'Explicit'}
