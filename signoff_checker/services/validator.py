import hashlib
import hmac
import json
from typing import Any

from pydantic import ValidationError

from signoff_checker.exceptions import AuthenticationError, DecodeError
from signoff_checker.schemas.github import (
    PingEvent,
    PullRequestEvent,
    UnhandledEvent,
    WebhookEvent,
)

SIGNATURE_ALGORITHMS = {
    "sha256": hashlib.sha256,
    "sha1": hashlib.sha1,
}


class WebhookValidator:
    def __init__(self, secret: bytes):
        self.secret = secret

    def verify_signature(self, body: bytes, signature_header: str | None) -> None:
        if not signature_header:
            raise AuthenticationError("missing signature")

        algorithm, sep, signature = signature_header.partition("=")
        digestmod = SIGNATURE_ALGORITHMS.get(algorithm)
        if not sep or digestmod is None or not signature:
            raise AuthenticationError(f"malformed signature header {signature_header!r}")

        expected = hmac.new(self.secret, body, digestmod).hexdigest()
        if not hmac.compare_digest(expected, signature):
            raise AuthenticationError("payload signature check failed")

    def parse_event(self, event_type: str | None, body: bytes) -> WebhookEvent:
        try:
            payload: Any = json.loads(body)
        except ValueError as e:
            raise DecodeError(f"invalid JSON payload: {e}")

        if not isinstance(payload, dict):
            raise DecodeError("payload is not a JSON object")

        match event_type:
            case "pull_request":
                try:
                    return PullRequestEvent.from_payload(payload)
                except (KeyError, TypeError, ValidationError) as e:
                    raise DecodeError(f"invalid pull_request payload: {e}")
            case "ping":
                try:
                    return PingEvent(
                        zen=payload.get("zen"), hook_id=payload.get("hook_id")
                    )
                except ValidationError as e:
                    raise DecodeError(f"invalid ping payload: {e}")
            case _:
                return UnhandledEvent(event_type=event_type or "")

    def validate(
        self, body: bytes, signature_header: str | None, event_type: str | None
    ) -> WebhookEvent:
        self.verify_signature(body, signature_header)
        return self.parse_event(event_type, body)
