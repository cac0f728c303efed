"""
Monitoring Module
Exports for structured logging
"""

from app.services.monitoring.logging import setup_logging, CorrelationJsonFormatter

__all__ = [
    "setup_logging",
    "CorrelationJsonFormatter",
]
