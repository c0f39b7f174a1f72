from prcoverage.cli.main import cli

cli()
