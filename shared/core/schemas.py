from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class JsonOutResult(BaseModel, Generic[T]):
    status: int
    message: str
    data: Optional[T] = None

    def to_content(self) -> dict:
        # "data" is left out entirely when there is nothing to return
        content = {"status": self.status, "message": self.message}
        if self.data is not None:
            content["data"] = self.data
        return content
