"""
FastAPI demo receiving Acuity static webhooks.

Usage:
    # Install dependencies
    pip install -e ".[fastapi]" fastapi uvicorn

    # Run the server
    ACUITY_WEBHOOK_SECRET=your-api-key uvicorn examples.fastapi_demo:app --port 8009 --reload

Test with curl:
    BODY='action=scheduled&id=42&calendarID=7'
    SIG=$(printf '%s' "$BODY" | openssl dgst -sha256 -hmac "$ACUITY_WEBHOOK_SECRET" -binary | base64)
    curl -X POST http://localhost:8009/webhooks/acuity \\
        -H 'Content-Type: application/x-www-form-urlencoded' \\
        -H "X-Acuity-Signature: $SIG" \\
        --data "$BODY"

Environment variables:
    ACUITY_WEBHOOK_SECRET - API key Acuity signs webhooks with (required unless verification is off)
    ACUITY_VERIFY_SIGNATURES - Set to "false" to skip verification for local testing
    ACUITY_WEBHOOK_PATH - Webhook path (default: /webhooks/acuity)
"""

import structlog
from fastapi import FastAPI, Request

from acuity_scheduling import AcuityWebhookASGIMiddleware, StaticWebhookEvent, WebhookSettings

logger = structlog.get_logger()

settings = WebhookSettings()


async def on_event(event: StaticWebhookEvent) -> None:
    logger.info("appointment_event", event_type=event.type.value, id=event.id)


app = FastAPI(
    title="Acuity Webhook Demo API",
    description="Demo API verifying Acuity static webhooks",
    version="0.1.0",
)

app.add_middleware(
    AcuityWebhookASGIMiddleware,
    secret=settings.webhook_secret,
    callback=on_event,
    path=settings.webhook_path,
    header_name=settings.signature_header,
    verify=settings.verify_signatures,
)


@app.post(settings.webhook_path)
async def acuity_webhook(request: Request):
    """Only reached by verified, decoded webhooks."""
    event = request.state.acuity_event
    return {
        "received": event.type.value,
        "id": event.id,
        "calendar_id": event.calendar_id,
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8009)
