from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter
from typing import List


class CatalogRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: StrictStr
    name: str
    # JSON numbers only: no numeric strings, booleans, NaN or Infinity
    cost: float = Field(strict=True, allow_inf_nan=False)


class SuggestRequest(BaseModel):
    input: StrictStr


class Suggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    position: int


class SuggestionResponse(BaseModel):
    suggestions: List[Suggestion]


# The refresh source is a bare JSON array of records.
CatalogDocument = TypeAdapter(List[CatalogRecord])
