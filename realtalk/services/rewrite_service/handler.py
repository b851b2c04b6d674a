"""Rewrite Service HTTP handler.

Called by the extension's background worker when the user asks for
rewrites (Advanced Mode) or a single smoothed message (Simple Mode).

Status codes:
    400 invalid request, 402 monthly quota spent, 500 configuration or
    unexpected errors. Model failures are not errors: the response
    carries templated rewrites with "fallback": true.
"""
import asyncio
import logging
import os

from flask import Flask, jsonify, request

from realtalk.shared.utils import configure_pii_salt
from realtalk.services.usage_service import UsageLimitExceeded
from realtalk.services.usage_service.handler import ledger
from .config import RewriteConfig
from .errors import ConfigurationError, RewriteValidationError
from .service import RewriteRequest, RewriteService, SmoothRequest

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Configure PII salt from environment
pii_salt = os.getenv("PII_HASH_SALT", "realtalk_dev_salt_change_in_production_32")
configure_pii_salt(pii_salt)

service = RewriteService(config=RewriteConfig.from_env(), ledger=ledger)


def _request_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _run(coroutine, event: str, failure_message: str):
    """Run a service call and map its errors to responses."""
    try:
        result = asyncio.run(coroutine)
    except RewriteValidationError as e:
        return jsonify({"error": str(e)}), 400
    except UsageLimitExceeded as e:
        return jsonify({"error": str(e), "usage": e.usage_status.to_dict()}), 402
    except ConfigurationError as e:
        logger.error(f"{event}_CONFIGURATION_ERROR", extra={"error": str(e)})
        return jsonify({"error": str(e)}), 500
    except Exception as e:
        logger.error(
            f"{event}_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({"error": failure_message}), 500

    return jsonify(result.to_dict()), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "rewrite-service",
        "model": service.config.model,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - the service can't call the model without a key."""
    if not service.config.api_key:
        return jsonify({"status": "not_ready", "reason": "api_key_not_configured"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/rewrite", methods=["POST"])
def rewrite():
    """Generate three rewrites of a draft.

    Request Body:
        {
            "text": "Draft message (1-500 chars)",
            "userId": "extension user id",
            "platform": "slack" (optional),
            "url": "https://..." (optional),
            "scenarioType": "deEscalation" | "customerComplaint" | ... (optional),
            "panic": true (optional)
        }

    Response:
        {
            "rewrites": [{"type": "professional", "text": "..."}, ...],
            "mode": "crisisResponse",
            "platform": "reddit",
            "labels": {"professional": {"label": "Apologetic", "emoji": "🆘"}, ...},
            "risk": {...},
            "usage": {...},
            "fallback": false
        }
    """
    data = _request_body()
    if data is None:
        return jsonify({"error": "Request body required"}), 400

    rewrite_request = RewriteRequest(
        text=data.get("text"),
        user_id=data.get("userId"),
        platform=data.get("platform") or "general",
        scenario_type=data.get("scenarioType"),
        panic=data.get("panic") is True,
        url=data.get("url"),
    )
    return _run(service.rewrite(rewrite_request), "REWRITE", "Failed to generate rewrites")


@app.route("/smooth", methods=["POST"])
def smooth():
    """Generate one smoothed version of a draft.

    Request Body:
        {
            "text": "Draft message (1-500 chars)",
            "userId": "extension user id",
            "toneValue": 0-100 (optional, suggested tone when omitted),
            "platform": "gmail" (optional)
        }
    """
    data = _request_body()
    if data is None:
        return jsonify({"error": "Request body required"}), 400

    smooth_request = SmoothRequest(
        text=data.get("text"),
        user_id=data.get("userId"),
        tone_value=data.get("toneValue"),
        platform=data.get("platform") or "general",
    )
    return _run(service.smooth(smooth_request), "SMOOTH", "Failed to smooth message")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8002"))
    app.run(host="0.0.0.0", port=port, debug=False)
