from typing import List, Literal, Optional

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from tracefn_core.models.models import Profile


class BaseConfig(BaseSettings):
    """Base class for configuration values."""

    pass


class TraceFnConfig(BaseConfig):
    """Configuration values for tracefn. All env variables must start with tracefn_"""

    profile: Profile = Profile.DEBUG
    """The build profile. 'debug' keeps instrumentation, 'release' elides it unless forced. Default 'debug'."""

    marker: str = 'trace_fn'
    """The decorator name that marks a function for instrumentation. Default 'trace_fn'."""

    opaque_types: List[str] = []
    """Annotation names that must be treated as not debug-printable, in addition to the ones detected in the source."""

    logging_level: Optional[int] = logging.INFO
    """The logging level of the transformer diagnostics. Default "logging.INFO"."""

    logging_file: Optional[str] = None
    """The log file path. Specify to save diagnostics to file. Default "None"."""

    theme: Optional[Literal['light', 'dark']] = None
    """The console theme to use. Default None (auto-detect)."""

    workers: Optional[int] = None
    """Number of files transformed in parallel by the build command. Default None (CPU count)."""

    model_config = SettingsConfigDict(
        env_prefix='tracefn_',
        env_file='.env',
        extra='ignore',
    )

    @property
    def instrumented(self) -> bool:
        """Whether the configured profile keeps non-forced instrumentation."""
        return self.profile == Profile.DEBUG
