from typing import Any, Optional

from pydantic import BaseModel


class Error(BaseModel):
    code: str
    message: str
    details: Optional[dict] = None


class BaseResponse(BaseModel):
    success: bool = True
    data: Optional[Any] = None
    error: Optional[Error] = None
    meta: Optional[dict] = None


class DeleteResultResponse(BaseModel):
    deleted: bool
    id: int
