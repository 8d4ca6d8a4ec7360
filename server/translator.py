"""
Request translation between raw HTTP payloads and the query engine.

Decoding and classification failures are returned as ``Err`` values rather
than raised, so a bad request can never take down the worker serving it.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Generic, List, TypeVar, Union

from pydantic import ValidationError

from log_config import get_logger
from schemas import SuggestRequest, Suggestion, SuggestionResponse
from suggester import QueryEngine

log = get_logger(__name__)

T = TypeVar("T")

SUBMIT_METHOD = "POST"


class ErrorKind(enum.Enum):
    MALFORMED_BODY = "Not json input"
    MISSING_FIELD = "Invalid fields in json input"
    UNSUPPORTED_METHOD = "Unknown HTTP-method"
    ROUTE_MISMATCH = "Wrong URI"

    @property
    def message(self) -> str:
        return self.value


class ResponseStatus(enum.Enum):
    OK = 200
    BAD_REQUEST = 400


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind


Result = Union[Ok[T], Err]


@dataclass(frozen=True)
class TranslatedResponse:
    status: ResponseStatus
    body: bytes
    media_type: str


class RequestTranslator:
    """
    Turns a raw request into a classified response.

    Parameters
    ----------
    engine : QueryEngine
        Engine answering decoded queries.
    endpoint : str
        The only request target that is served.
    """

    def __init__(self, engine: QueryEngine, endpoint: str) -> None:
        self.engine = engine
        self.endpoint = endpoint

    def decode(self, body: Union[bytes, str]) -> Result[str]:
        """Extract the query identifier from a JSON request body."""
        try:
            request = SuggestRequest.model_validate_json(body)
        except ValidationError as exc:
            if any(err["type"] == "json_invalid" for err in exc.errors()):
                return Err(ErrorKind.MALFORMED_BODY)
            return Err(ErrorKind.MISSING_FIELD)
        return Ok(request.input)

    def encode(self, suggestions: List[Suggestion]) -> bytes:
        payload = SuggestionResponse(suggestions=suggestions).model_dump()
        return json.dumps(payload, indent=4, ensure_ascii=False).encode("utf-8")

    def encode_error(self, kind: ErrorKind) -> bytes:
        return kind.message.encode("utf-8")

    def classify(self, method: str, target: str, body: Union[bytes, str]) -> Result[str]:
        # Body problems are reported ahead of route and method problems.
        decoded = self.decode(body)
        if isinstance(decoded, Err):
            return decoded
        if target != self.endpoint:
            return Err(ErrorKind.ROUTE_MISMATCH)
        if method.upper() != SUBMIT_METHOD:
            return Err(ErrorKind.UNSUPPORTED_METHOD)
        return decoded

    def handle(self, method: str, target: str, body: Union[bytes, str]) -> TranslatedResponse:
        """
        Serve a single request.

        Returns
        -------
        TranslatedResponse
            ``OK`` with a JSON suggestion list, or ``BAD_REQUEST`` with a
            plain-text message.
        """
        result = self.classify(method, target, body)
        if isinstance(result, Err):
            log.info(
                "Rejected request: %s",
                result.kind.name,
                extra={"method": method, "target": target},
            )
            return TranslatedResponse(
                ResponseStatus.BAD_REQUEST,
                self.encode_error(result.kind),
                "text/plain",
            )
        suggestions = self.engine.suggest(result.value)
        return TranslatedResponse(ResponseStatus.OK, self.encode(suggestions), "application/json")


__all__ = [
    "ErrorKind",
    "Err",
    "Ok",
    "RequestTranslator",
    "ResponseStatus",
    "Result",
    "TranslatedResponse",
]
