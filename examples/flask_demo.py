"""
Flask demo receiving Acuity static webhooks.

Usage:
    # Install dependencies
    pip install -e ".[flask]"

    # Run the server
    ACUITY_WEBHOOK_SECRET=your-api-key flask --app examples.flask_demo run --port 8010

Environment variables:
    ACUITY_WEBHOOK_SECRET - API key Acuity signs webhooks with (required unless verification is off)
    ACUITY_VERIFY_SIGNATURES - Set to "false" to skip verification for local testing
    ACUITY_WEBHOOK_PATH - Webhook path (default: /webhooks/acuity)
"""

import structlog
from flask import Flask, jsonify, request

from acuity_scheduling import StaticWebhookEvent, WebhookSettings
from acuity_scheduling.middleware import AcuityWebhookWSGIMiddleware

logger = structlog.get_logger()

settings = WebhookSettings()


def on_event(event: StaticWebhookEvent) -> None:
    logger.info("appointment_event", event_type=event.type.value, id=event.id)


app = Flask(__name__)

# Wrap with the webhook middleware
app.wsgi_app = AcuityWebhookWSGIMiddleware(
    app.wsgi_app,
    secret=settings.webhook_secret,
    callback=on_event,
    path=settings.webhook_path,
    header_name=settings.signature_header,
    verify=settings.verify_signatures,
)


@app.post(settings.webhook_path)
def acuity_webhook():
    """Only reached by verified, decoded webhooks."""
    event = request.environ["acuity.event"]
    return jsonify({
        "received": event.type.value,
        "id": event.id,
        "calendar_id": event.calendar_id,
    })


@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8010, debug=True)
