"""Flask backend answering award searches over WhatsApp and a JSON API."""
from __future__ import annotations

import logging
import os
from typing import Tuple
from xml.sax.saxutils import escape

from flask import Flask, Response, jsonify, request

from award_core import APOLOGY_MESSAGE, USAGE_MESSAGE, create_request, run_search

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

app = Flask(__name__)


def twiml_message(text: str) -> Response:
    """Wrap ``text`` in the TwiML envelope Twilio expects from a webhook."""

    body = f"<Response><Message>{escape(text)}</Message></Response>"
    return Response(body, mimetype="text/xml")


def answer_message(message: str) -> str:
    """Return the reply text for a free-text query; never raises."""

    try:
        search_request = create_request(message)
        if search_request is None:
            return USAGE_MESSAGE
        return run_search(search_request).report
    except Exception:
        LOGGER.exception("Failed to answer message %r", message)
        return APOLOGY_MESSAGE


@app.route("/whatsapp-webhook", methods=["POST"])
def whatsapp_webhook() -> Response:
    message = (request.form.get("Body") or "").strip()
    return twiml_message(answer_message(message))


@app.route("/api/search", methods=["POST"])
def api_search() -> Tuple[Response, int]:
    payload = request.get_json(force=True, silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": USAGE_MESSAGE}), 400

    search_request = create_request(payload)
    if search_request is None:
        return jsonify({"error": USAGE_MESSAGE}), 400

    result = run_search(search_request)
    return jsonify(result.to_dict()), 200


@app.route("/health")
def health() -> Response:
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
