"""Risk Service HTTP handler.

Called by the extension's background worker whenever the user selects or
edits a draft, so the popup can show the risk badge, context badges and
the panic-mode button before any rewrite is requested.

No PII in logs: drafts are only logged as hashes.
"""
import logging
import os

from flask import Flask, jsonify, request

from .assessor import RiskAssessor
from .config import RiskConfig
from .presentation import RISK_MESSAGES, render_recommendations

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

config = RiskConfig(
    lexicon_version=os.getenv("LEXICON_VERSION", RiskConfig.lexicon_version),
)
assessor = RiskAssessor(config=config)


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "risk-service",
        "lexicon_version": config.lexicon_version,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies assessor is initialized."""
    if assessor is None:
        return jsonify({"status": "not_ready", "reason": "assessor_not_initialized"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/assess", methods=["POST"])
def assess_message():
    """Assess the communication risk of a draft.

    Request Body:
        {
            "text": "Draft message",
            "platform": "slack" (optional, default "general"),
            "url": "https://..." (optional)
        }

    Response:
        RiskAssessment.to_dict() plus:
        {
            "risk_message": "Moderate Communication Risk",
            "recommendation_messages": ["..."],
            "show_panic_mode": false,
            "scenario_badge": "CUSTOMER SERVICE" | null,
            "is_public_audience": false
        }

    Missing or non-string text is assessed as an empty draft.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        logger.warning("ASSESS_REQUEST_INVALID", extra={"reason": "empty_body"})
        return jsonify({"error": "Request body required"}), 400

    try:
        assessment = assessor.assess(
            text=data.get("text"),
            platform=data.get("platform") or "general",
            context={"url": data.get("url")},
        )
    except Exception as e:
        logger.error(
            "ASSESS_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({"error": "Failed to assess message"}), 500

    response = assessment.to_dict()
    response.update({
        "risk_message": RISK_MESSAGES[assessment.overall_risk],
        "recommendation_messages": render_recommendations(assessment.recommendations),
        "show_panic_mode": assessment.show_panic_mode,
        "scenario_badge": assessment.scenario_badge,
        "is_public_audience": assessment.is_public_audience,
    })
    return jsonify(response), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8001"))
    app.run(host="0.0.0.0", port=port, debug=False)
