import structlog
from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import PlainTextResponse

from signoff_checker.dependencies import (
    get_pull_request_handler,
    get_webhook_validator,
)
from signoff_checker.exceptions import AuthenticationError, DecodeError
from signoff_checker.schemas.github import PingEvent, PullRequestEvent, UnhandledEvent
from signoff_checker.services import PullRequestHandler, WebhookValidator

logger = structlog.get_logger(__name__)

webhooks_router = APIRouter(tags=["webhooks"])


@webhooks_router.post("/webhook")
@webhooks_router.post("/api/webhooks/github")
async def receive_github_webhook(
    request: Request,
    x_github_event: str | None = Header(None, description="GitHub event type"),
    x_github_delivery: str | None = Header(None, description="GitHub delivery GUID"),
    x_hub_signature_256: str | None = Header(
        None, description="GitHub webhook signature"
    ),
    x_hub_signature: str | None = Header(
        None, description="Legacy SHA-1 GitHub webhook signature"
    ),
    validator: WebhookValidator = Depends(get_webhook_validator),
    handler: PullRequestHandler = Depends(get_pull_request_handler),
):
    log = logger.bind(delivery=x_github_delivery, event_type=x_github_event)
    body = await request.body()

    try:
        validator.verify_signature(body, x_hub_signature_256 or x_hub_signature)
    except AuthenticationError as e:
        log.warning("Rejected webhook with bad signature", error=str(e))
        return PlainTextResponse(
            f"Could not validate signature: {e}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        event = validator.parse_event(x_github_event, body)
    except DecodeError as e:
        log.warning("Rejected undecodable webhook", error=str(e))
        return PlainTextResponse(
            f"Error parsing payload: {e}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    match event:
        case PullRequestEvent():
            verdict = await handler.handle(event)
            response = {"message": "Pull request processed"}
            if verdict is not None:
                response["state"] = verdict.state
            return response
        case PingEvent():
            log.info("Received ping", hook_id=event.hook_id)
            return {"message": "pong"}
        case UnhandledEvent():
            log.info("Unhandled hook type")
            return {"message": f"Unhandled hook type: {event.event_type}"}
