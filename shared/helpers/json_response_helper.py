from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from shared.core.schemas import JsonOutResult


def envelope(http_status: int, message: str, data: Any = None) -> JSONResponse:
    result = JsonOutResult(status=http_status, message=message,
                           data=jsonable_encoder(data))
    return JSONResponse(content=result.to_content(), status_code=http_status)


def success_response(data: Any = None, message: str = "Success", http_status: int = status.HTTP_200_OK):
    return envelope(http_status, message, data)
