from typing import Optional

from tracefn_core.exceptions.generation_exception import GenerationException


class NotDebugPrintableException(GenerationException):
    """Exception raised when a logged parameter or the return value has a type
    without a meaningful `repr`.

    Attributes
    ----------
    target : str
        The parameter name, or `return` for the return annotation
    type_name : str
        The offending type
    """

    def __init__(
        self,
        target: str,
        type_name: str,
        function: str,
        details: Optional[dict] = None,
    ):
        self.target = target
        self.type_name = type_name
        subject = 'Return type' if target == 'return' else f'Parameter [{target}]'
        super().__init__(
            message=f'{subject} of type [{type_name}] has no debug representation; '
            'define __repr__ or add it to the skip option',
            function=function,
            details=details,
        )
