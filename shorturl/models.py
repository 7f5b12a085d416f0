from typing import Any

from pydantic import BaseModel, StrictStr, model_validator


class ShortenRequest(BaseModel):
    url: StrictStr = ""

    @model_validator(mode="before")
    @classmethod
    def fold_key_case(cls, data: Any) -> Any:
        # {"URL": ...} and {"Url": ...} are accepted too; the last matching key wins
        if isinstance(data, dict):
            return {str(k).lower(): v for k, v in data.items()}
        return data


class URLCollection(BaseModel):
    ActualURL: str
    ShortURL: str


class ShortenResponse(BaseModel):
    Code: int
    Message: str
    Response: URLCollection
