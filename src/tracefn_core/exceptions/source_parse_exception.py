class SourceParseException(Exception):
    """Exception raised when a source file is not valid Python.

    Attributes
    ----------
    filename : str
        The file being transformed
    lineno : int | None
        The line of the syntax error, if known
    """

    def __init__(self, exception: SyntaxError, filename: str):
        self.filename = filename
        self.lineno = exception.lineno
        self.message = f'Invalid Python source in [{filename}] at line {exception.lineno}: {exception.msg}'
        super().__init__(self.message)
