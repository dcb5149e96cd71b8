"""
Monitoring & Observability
Structured logging and per-report timing.
"""

import time
from typing import Callable, Any
from functools import wraps
import logging
import json
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from smartour.core.errors import DataAccessError

logger = logging.getLogger(__name__)


# ============================================================================
# STRUCTURED LOGGING
# ============================================================================

class JSONFormatter(logging.Formatter):
    """JSON formatter for structured log output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        duration_ms = getattr(record, "duration_ms", None)
        if duration_ms is not None:
            log_data["duration_ms"] = duration_ms
        return json.dumps(log_data)


# ============================================================================
# REPORT TIMING
# ============================================================================

def report_operation(report_name: str):
    """
    Decorator for report derivations.

    Logs how long the report took and turns data-store failures into a
    DataAccessError so the request fails with a 500 payload naming the report.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except SQLAlchemyError as e:
                elapsed = (time.perf_counter() - start) * 1000
                logger.error(
                    f"{report_name} failed after {elapsed:.0f}ms: {e}",
                    extra={"duration_ms": round(elapsed)},
                )
                raise DataAccessError(str(e), error=f"Failed to fetch {report_name}") from e
            elapsed = (time.perf_counter() - start) * 1000
            logger.info(
                f"{report_name} completed in {elapsed:.0f}ms",
                extra={"duration_ms": round(elapsed)},
            )
            return result

        return wrapper

    return decorator
