"""Telemetry module for logging, metrics, and reporting."""

from arbscan.telemetry.logger import AsyncLogger, setup_logging
from arbscan.telemetry.metrics import MetricsCollector
from arbscan.telemetry.reporter import OpportunityTable, SimpleReporter


__all__ = [
    "AsyncLogger",
    "MetricsCollector",
    "OpportunityTable",
    "SimpleReporter",
    "setup_logging",
]
