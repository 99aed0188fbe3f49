# File: src/common/exceptions/error_handlers.py

from typing import Dict, Any, Literal

import sentry_sdk

from common.exceptions.base_exception import DatabaseConnectionException
from common.logging.logger import log_error

ErrorType = Literal["general", "database"]


def report_error(*, exc: Exception, context: Dict[str, Any], error_type: ErrorType = "general"):
    """
    Log an unexpected error with its context and forward it to Sentry.
    """
    log_error(
        f"{error_type.capitalize()} error in {context.get('endpoint', 'unknown')}",
        extra={**context, "error": str(exc)},
        exc_info=True
    )
    sentry_sdk.capture_exception(exc)


async def handle_general_error(exc: Exception, context: Dict[str, Any]):
    report_error(exc=exc, context=context, error_type="general")


async def handle_db_error(exc: DatabaseConnectionException, context: Dict[str, Any]):
    report_error(exc=exc, context=context, error_type="database")
