from enum import Enum


class ProfileOption(str, Enum):
    """Build profiles accepted on the command line."""

    DEBUG = 'debug'
    RELEASE = 'release'
