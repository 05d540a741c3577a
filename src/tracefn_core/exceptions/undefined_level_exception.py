from typing import Optional

from tracefn_core.exceptions.generation_exception import GenerationException


class UndefinedLevelException(GenerationException):
    """Exception raised when the `level` option does not name a known severity.

    Attributes
    ----------
    level : str
        The level as written in the marker options
    """

    def __init__(self, level: str, function: str, details: Optional[dict] = None):
        self.level = level
        super().__init__(
            message=f'Undefined level [{level}], expected one of TRACE, DEBUG, INFO, WARN, ERROR',
            function=function,
            details=details,
        )
