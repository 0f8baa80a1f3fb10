"""Allow ``python -m idt``."""

from idt.main import cli

cli(prog_name="idt")
