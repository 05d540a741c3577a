from tracefn_cli.console.console import Console as Console
