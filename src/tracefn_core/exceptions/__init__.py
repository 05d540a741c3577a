from tracefn_core.exceptions.generation_exception import (
    GenerationException as GenerationException,
)
from tracefn_core.exceptions.undefined_level_exception import (
    UndefinedLevelException as UndefinedLevelException,
)
from tracefn_core.exceptions.not_debug_printable_exception import (
    NotDebugPrintableException as NotDebugPrintableException,
)
from tracefn_core.exceptions.unsupported_function_exception import (
    UnsupportedFunctionException as UnsupportedFunctionException,
)
from tracefn_core.exceptions.source_parse_exception import (
    SourceParseException as SourceParseException,
)
