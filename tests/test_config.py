import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from tracefn_core.models import Level, Profile, TraceFnConfig


class TestConfig:
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        config = TraceFnConfig(_env_file=None)

        assert config.profile == Profile.DEBUG
        assert config.marker == 'trace_fn'
        assert config.opaque_types == []
        assert config.logging_level == logging.INFO
        assert config.logging_file is None
        assert config.theme is None
        assert config.workers is None
        assert config.instrumented is True

    @patch.dict(
        os.environ,
        {
            'TRACEFN_PROFILE': 'release',
            'TRACEFN_MARKER': 'traced',
            'TRACEFN_OPAQUE_TYPES': '["Connection", "Session"]',
            'TRACEFN_WORKERS': '3',
        },
        clear=True,
    )
    def test_values_from_environment(self):
        config = TraceFnConfig(_env_file=None)

        assert config.profile == Profile.RELEASE
        assert config.instrumented is False
        assert config.marker == 'traced'
        assert config.opaque_types == ['Connection', 'Session']
        assert config.workers == 3

    def test_values_from_env_file(self, tmp_path):
        env_file = tmp_path / '.env'
        env_file.write_text('TRACEFN_PROFILE=release\nTRACEFN_THEME=light\n')

        with patch.dict(os.environ, {}, clear=True):
            config = TraceFnConfig(_env_file=str(env_file))

        assert config.profile == Profile.RELEASE
        assert config.theme == 'light'

    def test_unknown_profile_is_rejected(self):
        with pytest.raises(ValidationError):
            TraceFnConfig(profile='fast')


class TestLevel:
    def test_logging_levels(self):
        assert Level.TRACE.logging_level == 5
        assert Level.DEBUG.logging_level == logging.DEBUG
        assert Level.INFO.logging_level == logging.INFO
        assert Level.WARN.logging_level == logging.WARNING
        assert Level.ERROR.logging_level == logging.ERROR
