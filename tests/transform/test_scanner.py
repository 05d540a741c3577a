import ast
import logging
import textwrap
import types

import pytest

from tracefn_core.exceptions import (
    NotDebugPrintableException,
    SourceParseException,
    UndefinedLevelException,
)
from tracefn_core.transform.scanner import transform_source

CALC = '''\
"""Calculator."""
from __future__ import annotations

from tracefn_core import trace_fn


@trace_fn
def add(a: int, b: int) -> int:
    return a + b


@trace_fn(level="info", skip="password")
def login(username: str, password: str) -> bool:
    return password == "secret"


@trace_fn(force=true)
def ping():
    return None


def untouched(x):
    return x
'''


def run_module(source, name='calc'):
    module = types.ModuleType(name)
    exec(compile(source, f'{name}.py', 'exec'), module.__dict__)
    return module


class TestTransformSource:
    def test_source_without_markers_is_unchanged(self):
        source = '# comment kept\ndef f(x):\n    return x\n'

        result = transform_source(source)

        assert result.source == source
        assert result.functions == []

    def test_debug_profile_instruments_every_marked_function(self):
        result = transform_source(CALC, filename='calc.py')

        assert [function.name for function in result.functions] == ['add', 'login', 'ping']
        assert [function.mode for function in result.functions] == [
            'conditional',
            'conditional',
            'forced',
        ]
        assert '@trace_fn' not in result.source

    def test_release_profile_elides_unless_forced(self):
        result = transform_source(CALC, filename='calc.py', instrumented=False)

        modes = {function.name: function.mode for function in result.functions}
        assert modes == {'add': 'elided', 'login': 'elided', 'ping': 'forced'}
        assert 'def add(a: int, b: int) -> int:\n    return a + b' in result.source

    def test_runtime_import_follows_docstring_and_future_imports(self):
        result = transform_source(CALC, filename='calc.py')

        body = ast.parse(result.source).body
        assert isinstance(body[0], ast.Expr)
        assert isinstance(body[1], ast.ImportFrom) and body[1].module == '__future__'
        assert ast.unparse(body[2]) == 'import tracefn_core.runtime as _tracefn_runtime'

    def test_runtime_import_is_omitted_when_everything_is_elided(self):
        source = '@trace_fn\ndef add(a, b):\n    return a + b\n'

        result = transform_source(source, instrumented=False)

        assert '_tracefn_runtime' not in result.source
        assert result.source == 'def add(a, b):\n    return a + b\n'

    def test_attribute_marker(self):
        source = 'import tracefn_core\n\n@tracefn_core.trace_fn\ndef f():\n    pass\n'

        result = transform_source(source)

        assert [function.name for function in result.functions] == ['f']

    def test_custom_marker_name(self):
        source = '@traced\ndef f():\n    pass\n\n@trace_fn\ndef g():\n    pass\n'

        result = transform_source(source, marker='traced')

        assert [function.name for function in result.functions] == ['f']

    def test_nested_and_method_functions(self):
        source = textwrap.dedent(
            """
            class Account:
                def __init__(self, balance):
                    self.balance = balance

                def __repr__(self):
                    return f'Account({self.balance})'

                @trace_fn
                def deposit(self, amount):
                    @trace_fn
                    def check(value):
                        return value > 0
                    check(amount)
                    self.balance += amount
                    return self.balance
            """
        )

        result = transform_source(source)

        assert [function.name for function in result.functions] == ['check', 'deposit']

    def test_invalid_source(self):
        with pytest.raises(SourceParseException) as excinfo:
            transform_source('def broken(:\n', filename='broken.py')

        assert excinfo.value.filename == 'broken.py'
        assert excinfo.value.lineno == 1
        assert 'Invalid Python source in [broken.py]' in str(excinfo.value)

    def test_undefined_level(self):
        source = '@trace_fn(level="verbose")\ndef f():\n    pass\n'

        with pytest.raises(UndefinedLevelException):
            transform_source(source)

    def test_class_without_repr_is_rejected(self):
        source = textwrap.dedent(
            """
            class Connection:
                pass

            @trace_fn
            def query(conn: Connection, sql: str):
                pass
            """
        )

        with pytest.raises(NotDebugPrintableException) as excinfo:
            transform_source(source)

        assert excinfo.value.target == 'conn'

    def test_class_without_repr_can_be_skipped(self):
        source = textwrap.dedent(
            """
            class Connection:
                pass

            @trace_fn(skip="conn")
            def query(conn: Connection, sql: str):
                pass
            """
        )

        result = transform_source(source)

        assert result.instrumented[0].name == 'query'

    def test_configured_opaque_types(self):
        source = '@trace_fn\ndef f(session: Session):\n    pass\n'

        with pytest.raises(NotDebugPrintableException):
            transform_source(source, opaque_types=['Session'])

    def test_decisions_are_logged(self, caplog):
        logger = logging.getLogger('tracefn.tests.scanner')
        caplog.set_level(logging.DEBUG, logger='tracefn.tests.scanner')

        transform_source(CALC, filename='calc.py', logger=logger)

        assert '[add] at calc.py:8 conditional (level=TRACE, args=2, skipped=0)' in caplog.messages
        assert '[ping] at calc.py:18 forced (level=TRACE, args=0, skipped=0)' in caplog.messages


class TestTransformedModule:
    @pytest.fixture(autouse=True)
    def trace_level(self, caplog):
        caplog.set_level(5)

    def test_end_to_end(self, caplog):
        result = transform_source(CALC, filename='calc.py')
        module = run_module(result.source)

        assert module.add(2, 3) == 5
        assert module.login('u', 'p') is False
        assert module.ping() is None
        assert module.untouched(1) == 1

        messages = caplog.messages
        assert messages[0] == '>>> [add] #Args: a=2, b=3 --- calc.py:8'
        assert messages[1].startswith('<<< [add] #Ret: 5, duration: ')
        assert messages[2] == ">>> [login] #Args: username='u', password=*** --- calc.py:13"
        assert messages[3].startswith('<<< [login] #Ret: False, duration: ')
        assert messages[4] == '>>> [ping] #Args: () --- calc.py:18'
        assert len(messages) == 6
        assert all(record.name == 'calc' for record in caplog.records)

    def test_elided_module_logs_nothing(self, caplog):
        result = transform_source(CALC, filename='calc.py', instrumented=False)
        module = run_module(result.source)

        assert module.add(2, 3) == 5
        assert module.login('u', 'p') is False

        assert caplog.messages == []

    def test_methods_do_not_log_the_receiver(self, caplog):
        source = textwrap.dedent(
            """
            class Account:
                def __init__(self, balance):
                    self.balance = balance

                @trace_fn
                def deposit(self, amount):
                    self.balance += amount
                    return self.balance

                @classmethod
                @trace_fn
                def empty(cls):
                    return cls(0)
            """
        )
        module = run_module(transform_source(source, filename='bank.py').source, 'bank')

        account = module.Account(10)
        assert account.deposit(5) == 15
        assert module.Account.empty().balance == 0

        assert caplog.messages[0] == '>>> [deposit] #Args: amount=5 --- bank.py:7'
        assert caplog.messages[2] == '>>> [empty] #Args: () --- bank.py:13'

    def test_private_names_in_class_body(self, caplog):
        source = textwrap.dedent(
            """
            class Vault:
                @trace_fn
                def __open(self, code):
                    return code * 2

                def open(self, code):
                    return self.__open(code)
            """
        )
        module = run_module(transform_source(source, filename='vault.py').source, 'vault')

        assert module.Vault().open(4) == 8
        assert caplog.messages[0] == '>>> [__open] #Args: code=4 --- vault.py:4'


class TestReleaseElision:
    def test_opaque_types_are_not_checked_when_elided(self):
        source = 'class Opaque:\n    pass\n\n@trace_fn\ndef use(o: Opaque) -> Opaque:\n    return o\n'

        result = transform_source(source, instrumented=False)

        assert result.functions[0].mode == 'elided'
        assert result.source == (
            'class Opaque:\n    pass\n\ndef use(o: Opaque) -> Opaque:\n    return o\n'
        )

    def test_opaque_types_are_checked_when_forced(self):
        source = 'class Opaque:\n    pass\n\n@trace_fn(force=true)\ndef use(o: Opaque):\n    pass\n'

        with pytest.raises(NotDebugPrintableException):
            transform_source(source, instrumented=False)
