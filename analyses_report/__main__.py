from analyses_report.cli import cli

cli()
