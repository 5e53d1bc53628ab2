from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import DecodeError, EnvelopeError

ORDER_MAX = 2**32 - 1


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    url: str
    image: str = ""
    description: str = ""
    order: int = Field(default=0, ge=0, le=ORDER_MAX)


class DeleteArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str


class SaveRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    link: Link = Field(alias="Save")


class DeleteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    args: DeleteArgs = Field(alias="Delete")

    @property
    def name(self) -> str:
        return self.args.name


LinkRequest = Union[SaveRequest, DeleteRequest]

_link_request_adapter: TypeAdapter[LinkRequest] = TypeAdapter(LinkRequest)


def decode_link_request(payload: bytes | None) -> LinkRequest:
    """
    Decode a POST body of the form {"Save": {...}} or {"Delete": {"name": ...}}.
    Raises DecodeError when the body is missing or matches neither shape.
    """
    if not payload:
        raise DecodeError("request body required")
    try:
        return _link_request_adapter.validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(f"not a Save or Delete operation ({exc.error_count()} errors)") from exc


class IncomingHttpRequest(BaseModel):
    method: str = Field(min_length=1)
    path: str = "/"
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("method")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()


def decode_envelope(envelope: object) -> IncomingHttpRequest:
    try:
        return IncomingHttpRequest.model_validate(envelope)
    except ValidationError as exc:
        raise EnvelopeError(str(exc)) from exc


class HttpResponse(BaseModel):
    status: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
