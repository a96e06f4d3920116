from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

GenResponseType = TypeVar("GenResponseType")


class GenResponse(BaseModel, Generic[GenResponseType]):
    data: Optional[GenResponseType] = None
    msg: Optional[str] = ""
