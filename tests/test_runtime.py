import logging

import pytest

from tracefn_core import runtime
from tracefn_core.logging import TRACE


class TestFormatDuration:
    @pytest.mark.parametrize(
        'seconds, expected',
        [
            (2.5, '2.5s'),
            (1.0, '1s'),
            (0.0012345, '1.2345ms'),
            (0.25, '250ms'),
            (0.000042, '42µs'),
            (4.2e-7, '420ns'),
            (0.0, '0ns'),
        ],
    )
    def test_format(self, seconds, expected):
        assert runtime.format_duration(seconds) == expected


class TestEvents:
    def test_enter(self, caplog):
        caplog.set_level(TRACE)

        runtime.enter('app.calc', 'TRACE', 'add', 'a=2, b=3', 'calc.py', 4)

        record = caplog.records[0]
        assert record.getMessage() == '>>> [add] #Args: a=2, b=3 --- calc.py:4'
        assert record.name == 'app.calc'
        assert record.levelname == 'TRACE'

    def test_leave(self, caplog):
        caplog.set_level(TRACE)

        runtime.leave('app.calc', 'WARN', 'add', 'five', 0.5)

        record = caplog.records[0]
        assert record.getMessage() == "<<< [add] #Ret: 'five', duration: 500ms"
        assert record.levelno == logging.WARNING

    def test_leave_does_not_render_disabled_events(self, caplog):
        caplog.set_level(logging.ERROR)

        class Loud:
            def __repr__(self):
                raise AssertionError('repr called for a disabled event')

        runtime.leave('app.calc', 'DEBUG', 'make', Loud(), 0.1)

        assert caplog.records == []

    def test_clock_is_monotonic(self):
        first = runtime.clock()
        assert runtime.clock() >= first
