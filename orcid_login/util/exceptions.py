from logging import getLogger
from typing import Dict, Any, Union

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

logger = getLogger(__name__)


class ApplicationException(Exception):
    def __init__(
        self,
        status_code: int,
        msg: Union[str, Exception] = "",
        data: Dict[str, Any] = None,
    ):
        super().__init__(str(msg))
        self.name = "ApplicationException"
        self.msg = str(msg)
        self.data = data
        self.status_code = status_code


class StrategyConfigError(Exception):
    """
    A login strategy cannot be constructed from its configuration
    (missing field, malformed callback url, ...)
    """

    def __init__(self, strategy: str, reason: Union[str, Exception]):
        super().__init__(f"Invalid configuration for strategy '{strategy}': {reason}")
        self.strategy = strategy
        self.reason = reason


class MalformedProviderResponse(Exception):
    """
    The identity provider answered without the fields we need (e.g. the orcid id)
    """

    def __init__(self, provider: str, missing_field: str):
        super().__init__(f"{provider} response is missing '{missing_field}'")
        self.provider = provider
        self.missing_field = missing_field


async def application_exception_handler(request: Request, exc: ApplicationException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.status_code,
            "msg": exc.msg,
            "data": jsonable_encoder(exc.data),
            "error": {"msg": exc.msg},
        },
    )


async def exception_handler(request: Request, exc: Exception):
    logger.error(f"Unknown exception for {request.url}: !!", exc_info=exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=dict(exception=str(exc))
    )
