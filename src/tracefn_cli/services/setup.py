"""Configuration and diagnostics logger shared by the commands."""

import logging
from typing import Optional

from tracefn_core.facade import TraceFn
from tracefn_core.logging import create_isolated_logger
from tracefn_core.models import TraceFnConfig


def load_config(env_file: Optional[str] = None) -> TraceFnConfig:
    """Load the configuration, from a specific env file when given, and hand it to the facade."""
    config = TraceFnConfig(_env_file=env_file) if env_file else TraceFnConfig()
    TraceFn.configure(config)
    return config


def create_cli_logger(config: TraceFnConfig, verbose: bool = False) -> logging.Logger:
    """Logger receiving the per-function decisions of the transformer."""
    return create_isolated_logger(
        name='tracefn',
        level=logging.DEBUG if verbose else config.logging_level,
        add_console_handler=True,
        add_file_handler=config.logging_file is not None,
        file_path=config.logging_file,
    )
