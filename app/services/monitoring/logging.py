"""
Structured JSON Logging with Correlation ID
Provides JSON formatter that automatically injects correlation IDs into all log entries
"""

import logging
import sys
from pythonjsonlogger import jsonlogger

from app.config import settings
from app.middleware import get_correlation_id


class CorrelationJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with automatic correlation ID injection.

    Extends python-json-logger to add correlation_id field to every log record.
    The correlation ID is retrieved from async context (set by CorrelationIdMiddleware).
    """

    def add_fields(self, log_record, record, message_dict):
        """
        Add custom fields to log record.

        Adds:
        - correlation_id: From async context or 'none' outside a request
        - service: Application name for multi-service environments
        - environment: Deployment environment (development/production)
        """
        super().add_fields(log_record, record, message_dict)

        log_record["correlation_id"] = get_correlation_id()
        log_record['service'] = settings.service_name
        log_record['environment'] = settings.environment


def setup_logging(level: str = None):
    """
    Configure structured JSON logging to stdout.

    Sets up root logger with:
    - CorrelationJsonFormatter for machine-parseable JSON output
    - Level from settings.log_level unless overridden
    - StreamHandler outputting to stdout

    Returns:
        logging.Handler: The configured handler (for testing)
    """
    handler = logging.StreamHandler(sys.stdout)

    formatter = CorrelationJsonFormatter(
        '%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={
            'asctime': 'timestamp',
            'levelname': 'level'
        }
    )
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel((level or settings.log_level).upper())

    return handler
