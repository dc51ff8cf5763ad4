"""Pipewatch: a CI/CD pipeline dashboard simulator."""

__version__ = "0.1.0"
