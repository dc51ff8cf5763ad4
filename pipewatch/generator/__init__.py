"""Synthetic event generation.

Submodules:
    generator -- EventGenerator: biased random pipeline runs and seed history.
"""

from pipewatch.generator.generator import DEFAULT_SEED_COUNT, DEFAULT_SEED_SPACING, EventGenerator

__all__ = ["DEFAULT_SEED_COUNT", "DEFAULT_SEED_SPACING", "EventGenerator"]
