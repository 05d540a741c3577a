from typing import Optional


class GenerationException(Exception):
    """Exception raised when an annotated function cannot be instrumented.

    Generation failures happen while the replacement function is built, never
    while an instrumented function runs.

    Attributes
    ----------
    message : str
        Explanation of the failure
    function : str
        Name of the annotated function
    details : dict, optional
        Additional details, such as the source location

    Example
    ---------
    try:
        raise GenerationException(
            message="Async generators cannot be instrumented",
            function="stream",
            details={"file": "app.py", "line": 12}
        )
    except GenerationException as e:
        print(e)  # Will print: "Cannot instrument [stream]: Async generators cannot be instrumented"
    """

    def __init__(
        self,
        message: str,
        function: str,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.function = function
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        base_message = f'Cannot instrument [{self.function}]: {self.message}'
        if self.details:
            return f'{base_message}\nDetails: {self.details}'
        return base_message
