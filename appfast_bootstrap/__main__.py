"""Allow ``python -m appfast_bootstrap``."""

from appfast_bootstrap.main import cli

cli()
