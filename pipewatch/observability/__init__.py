"""Logging and metrics for Pipewatch."""
