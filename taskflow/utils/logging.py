"""Logging configuration for the TaskFlow application."""

import copy
import logging
import logging.handlers
import sys
import time

from ..config import Settings


class ColoredFormatter(logging.Formatter):
    """Custom formatter with color support for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors for console output."""
        # Records are shared between handlers; colour a copy only.
        record = copy.copy(record)
        if record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}"
                f"{self.COLORS['RESET']}"
            )
        return super().format(record)


def setup_logging(settings: Settings) -> None:
    """Setup logging for the application.

    Args:
        settings: Application settings containing logging configuration
    """
    log_dir = settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    root_logger.handlers.clear()

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(console_handler)

    file_formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # File handler for all logs
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / "app.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    # Error file handler for errors and above
    error_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / "error.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_formatter)
    root_logger.addHandler(error_handler)

    configure_module_loggers(settings)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {settings.log_level.upper()}")
    logger.info(f"Log files will be written to: {log_dir.absolute()}")


def configure_module_loggers(settings: Settings) -> None:
    """Configure logging levels for specific modules.

    Args:
        settings: Application settings
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    for logger_name in ('taskflow.main', 'taskflow.routes', 'taskflow.services'):
        logging.getLogger(logger_name).setLevel(level)

    third_party_loggers = {
        'uvicorn': logging.INFO,
        'uvicorn.access': logging.WARNING,
        'fastapi': logging.INFO,
        'httpx': logging.WARNING,
    }
    for logger_name, third_party_level in third_party_loggers.items():
        logging.getLogger(logger_name).setLevel(third_party_level)

    # Suppress overly verbose loggers in production
    if settings.environment == "production":
        logging.getLogger('uvicorn.access').setLevel(logging.ERROR)


def configure_request_logging():
    """Build the request/response logging middleware for FastAPI."""
    from fastapi import Request

    async def log_requests(request: Request, call_next):
        """Middleware to log HTTP requests and responses."""
        logger = logging.getLogger("taskflow.middleware.requests")

        start_time = time.time()
        logger.info(f"Request: {request.method} {request.url}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url} "
            f"in {process_time:.3f}s"
        )
        return response

    return log_requests


def log_startup_info(settings: Settings):
    """Log application startup information.

    Args:
        settings: Application settings
    """
    logger = logging.getLogger("taskflow.startup")

    logger.info("=" * 60)
    logger.info(f"{settings.app_name} Starting")
    logger.info("=" * 60)
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Log Level: {settings.log_level.upper()}")
    logger.info(f"Persistence Backend: {settings.persistence_backend}")
    if settings.persistence_backend == "json":
        logger.info(f"Data Directory: {settings.data_dir}")
    elif settings.simulated_latency_ms:
        logger.info(f"Simulated Latency: {settings.simulated_latency_ms}ms")
    logger.info("=" * 60)


def log_shutdown_info(settings: Settings):
    """Log application shutdown information."""
    logger = logging.getLogger("taskflow.shutdown")

    logger.info("=" * 60)
    logger.info(f"{settings.app_name} Shutting Down")
    logger.info("=" * 60)


class TimedOperation:
    """Context manager for timing operations."""

    def __init__(self, operation_name: str, logger_name: str = __name__):
        """Initialize timed operation.

        Args:
            operation_name: Name of the operation
            logger_name: Logger name to use
        """
        self.operation_name = operation_name
        self.logger = logging.getLogger(logger_name)
        self.start_time = None

    def __enter__(self):
        """Start timing."""
        self.start_time = time.time()
        self.logger.debug(f"Starting operation: {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End timing and log result."""
        duration = time.time() - self.start_time

        if exc_type is None:
            self.logger.info(f"Operation completed: {self.operation_name} in {duration:.3f}s")
        else:
            self.logger.error(f"Operation failed: {self.operation_name} after {duration:.3f}s")


__all__ = [
    'setup_logging',
    'configure_module_loggers',
    'configure_request_logging',
    'log_startup_info',
    'log_shutdown_info',
    'TimedOperation',
]
