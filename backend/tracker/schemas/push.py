"""
Mounjaro Tracker Backend — Push Subscription Schemas
======================================================

Shape of the browser's PushSubscription.toJSON() output.

The endpoint is checked as an http(s) URL but stored exactly as sent:
unsubscribe matches on the raw string the browser still holds, and a
normalised URL (lowercased host, trailing slash) would never match it.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Endpoint must be an http(s) URL")
    return value


EndpointUrl = Annotated[str, Field(min_length=1), AfterValidator(_check_http_url)]


class PushKeys(BaseModel):
    p256dh: str = Field(min_length=1, max_length=255)
    auth: str = Field(min_length=1, max_length=255)


class PushSubscribeRequest(BaseModel):
    endpoint: EndpointUrl
    keys: PushKeys


class PushUnsubscribeRequest(BaseModel):
    endpoint: str = Field(min_length=1)


class PushSubscriptionResult(BaseModel):
    success: bool = True
    message: str
