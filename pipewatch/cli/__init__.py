"""Pipewatch command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``pipewatch`` script).
"""

from pipewatch.cli.main import cli

__all__ = ["cli"]
