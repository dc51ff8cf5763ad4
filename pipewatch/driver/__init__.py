"""Refresh driver: the fixed-interval tick that feeds the dashboard."""

from pipewatch.driver.refresh import DEFAULT_INTERVAL_MS, RefreshDriver, UpdateCallback

__all__ = ["DEFAULT_INTERVAL_MS", "RefreshDriver", "UpdateCallback"]
