from tracefn_core.exceptions.generation_exception import GenerationException


class UnsupportedFunctionException(GenerationException):
    """Exception raised for function kinds the instrumentation cannot wrap."""

    pass
