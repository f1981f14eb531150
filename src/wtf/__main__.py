"""Allow ``python -m wtf``."""

from wtf.cli import main

main()
