"""
Logging utilities for the account service

Provides logging configuration, structured loggers and trace timing.
"""

import logging
import logging.config
import os
import time
from copy import deepcopy
from typing import Any, Dict, Optional

import structlog
import yaml

# Default logging configuration
DEFAULT_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {
            'format': '%(message)s'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'plain',
            'stream': 'ext://sys.stdout'
        }
    },
    'loggers': {
        'account_service': {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False
        }
    }
}

LOG_FORMATS = ('console', 'json')


def _load_config_file(config_path: str) -> Optional[Dict[str, Any]]:
    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logging.getLogger(__name__).warning(f"Failed to load logging config from {config_path}: {e}")
        return None


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None
) -> None:
    """
    Setup logging configuration

    Args:
        config_path: Path to a YAML logging configuration file
        log_level: Override log level
        log_format: Renderer for structured events ('console' or 'json')
    """
    config = None
    if config_path and os.path.exists(config_path):
        config = _load_config_file(config_path)

    if not config:
        config = deepcopy(DEFAULT_LOGGING_CONFIG)

    if log_level:
        log_level = log_level.upper()
        for logger_config in config.get('loggers', {}).values():
            logger_config['level'] = log_level
        for handler_config in config.get('handlers', {}).values():
            handler_config['level'] = log_level

    logging.config.dictConfig(config)

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == 'json'
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """
    Get logger instance

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog bound logger
    """
    return structlog.get_logger(name)


class AuditLogger:
    """Logger for account audit events"""

    def __init__(self, name: str = "account_service.audit"):
        self.logger = structlog.get_logger(name)

    def log_user_action(
        self,
        user_id: str,
        action: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Log user action for audit trail"""
        self.logger.info(
            "user_action",
            user_id=user_id,
            action=action,
            details=details or {},
        )


class PerformanceLogger:
    """Logger for trace timings"""

    def __init__(self, name: str = "account_service.performance"):
        self.logger = structlog.get_logger(name)

    def log_performance(self, operation: str, duration: float, component: str):
        self.logger.info(
            "trace",
            operation=operation,
            duration=round(duration, 4),
            component=component,
        )


def get_audit_logger() -> AuditLogger:
    """Get audit logger instance"""
    return AuditLogger()


def get_performance_logger() -> PerformanceLogger:
    """Get performance logger instance"""
    return PerformanceLogger()


class performance_timer:
    """Context manager timing a named trace.

    The duration is logged whether the block succeeds or raises.
    """

    def __init__(self, operation: str, component: str, logger: Optional[PerformanceLogger] = None):
        self.operation = operation
        self.component = component
        self.logger = logger or get_performance_logger()
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        self.logger.log_performance(self.operation, self.duration, self.component)
        return False


def init_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    config_path: Optional[str] = None
):
    """Initialize logging, falling back to environment variables"""
    setup_logging(
        config_path or os.getenv('LOGGING_CONFIG_PATH'),
        log_level or os.getenv('LOG_LEVEL', 'INFO'),
        log_format or os.getenv('LOG_FORMAT', 'console'),
    )
