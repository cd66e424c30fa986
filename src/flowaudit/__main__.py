"""Allow ``python -m flowaudit``."""

from flowaudit.cli import app


app(prog_name="flowaudit")
