"""Allow ``python -m devsetup``."""

from devsetup.main import cli

cli()
