from tracefn_core.logging.logger import (
    TRACE as TRACE,
    create_isolated_logger as create_isolated_logger,
    create_null_logger as create_null_logger,
)
