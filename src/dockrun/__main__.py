"""
dockrun - Main entry point

Allows `python -m dockrun`, delegating to cli.py.
"""

from .cli import cli

if __name__ == "__main__":
    cli()
