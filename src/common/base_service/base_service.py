# File: src/common/base_service/base_service.py
from abc import ABC
from typing import Any, Awaitable, Callable, Dict

from fastapi import HTTPException

from common.exceptions.base_exception import DatabaseConnectionException, InternalServerErrorException
from common.exceptions.error_handlers import handle_db_error, handle_general_error
from common.logging.logger import log_info, log_error


class BaseService(ABC):
    async def execute(self, operation: Callable[[], Awaitable[Any]], context: Dict[str, Any]):
        try:
            result = await operation()
            log_info(f"{context.get('action', 'Operation')} executed successfully", extra=context)
            return result
        except DatabaseConnectionException as db_exc:
            await handle_db_error(db_exc, context)
            raise
        except HTTPException as http_exc:
            log_error(f"HTTP exception in {context.get('endpoint', 'service')}",
                      extra={**context, "error": str(http_exc.detail)})
            raise
        except Exception as e:
            await handle_general_error(e, context)
            raise InternalServerErrorException(detail="Internal server error")
