"""Entry point for `python -m pipewatch`.

Usage:
    python -m pipewatch
    uv run python -m pipewatch
"""

from __future__ import annotations

import asyncio

from pipewatch.app import main

asyncio.run(main())
