from tracefn_cli.services.setup import (
    load_config as load_config,
    create_cli_logger as create_cli_logger,
)
