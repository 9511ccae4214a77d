"""
Command-line interface for discrete-hmm.
"""

from .main import app, cli_main

__all__ = ["app", "cli_main"]
