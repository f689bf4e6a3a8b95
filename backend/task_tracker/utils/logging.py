# backend/task_tracker/utils/logging.py
import logging
import sys
from logging.handlers import RotatingFileHandler
from ..config import settings

LOG_DIR = settings.LOG_PATH
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Create formatters
verbose_formatter = logging.Formatter(
    '\033[1;36m%(asctime)s\033[0m - \033[1;33m%(name)s\033[0m - \033[1;35m%(levelname)s\033[0m [\033[1;34m%(module)s:%(lineno)d\033[0m] - %(message)s'
)
file_formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s [%(module)s:%(lineno)d] - %(message)s'
)

class TrackerLogger:
    """Logger wrapper that keeps `extra` keys from clobbering LogRecord attributes"""
    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)
        self.setup_handlers()

        self.reserved_attrs = {
            'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
            'funcName', 'levelname', 'levelno', 'lineno', 'module', 'msecs',
            'message', 'msg', 'name', 'pathname', 'process', 'processName',
            'relativeCreated', 'stack_info', 'thread', 'threadName', 'taskName'
        }

    def setup_handlers(self):
        """Set up file and console handlers"""
        if self.logger.handlers:
            return

        file_handler = RotatingFileHandler(
            LOG_DIR / f"{self.logger.name}.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(file_formatter)
        self.logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(verbose_formatter)
        self.logger.addHandler(console_handler)

    def _sanitize_extra(self, extra):
        """Prefix extra fields that collide with reserved attributes"""
        if extra is None:
            return None

        sanitized = {}
        for key, value in extra.items():
            if key in self.reserved_attrs:
                sanitized[f"extra_{key}"] = value
            else:
                sanitized[key] = value
        return sanitized

    def debug(self, msg, extra=None, exc_info=None):
        self.logger.debug(msg, extra=self._sanitize_extra(extra), exc_info=exc_info, stacklevel=2)

    def info(self, msg, extra=None, exc_info=None):
        self.logger.info(msg, extra=self._sanitize_extra(extra), exc_info=exc_info, stacklevel=2)

    def warning(self, msg, extra=None, exc_info=None):
        self.logger.warning(msg, extra=self._sanitize_extra(extra), exc_info=exc_info, stacklevel=2)

    def error(self, msg, extra=None, exc_info=None):
        self.logger.error(msg, extra=self._sanitize_extra(extra), exc_info=exc_info, stacklevel=2)

    def critical(self, msg, extra=None, exc_info=None):
        self.logger.critical(msg, extra=self._sanitize_extra(extra), exc_info=exc_info, stacklevel=2)

# Create loggers for different components
api_logger = TrackerLogger("api")
db_logger = TrackerLogger("database")
service_logger = TrackerLogger("service")
scheduler_logger = TrackerLogger("scheduler")

__all__ = ["api_logger", "db_logger", "service_logger", "scheduler_logger"]
