"""Usage Service HTTP handler.

The extension popup calls /usage/check to render the remaining-quota
counter; the rewrite service records usage in-process through the same
UsageLedger.
"""
import logging
import os

from flask import Flask, jsonify, request

from realtalk.shared.database import RepositoryError, get_connection_manager
from realtalk.shared.utils import configure_pii_salt
from .ledger import UsageLedger, UsageLimits
from .store import InMemoryUsageStore, PostgresUsageRepository

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Configure PII salt from environment
pii_salt = os.getenv("PII_HASH_SALT", "realtalk_dev_salt_change_in_production_32")
configure_pii_salt(pii_salt)


def create_ledger() -> UsageLedger:
    """Build the ledger from the environment.

    USAGE_STORE=postgres selects the users table and USAGE_STORE=memory
    keeps counters in memory. When USAGE_STORE is unset, a configured
    DATABASE_URL selects the users table.
    """
    default_store = "postgres" if os.getenv("DATABASE_URL") else "memory"
    if os.getenv("USAGE_STORE", default_store).lower() == "postgres":
        store = PostgresUsageRepository(get_connection_manager())
    else:
        store = InMemoryUsageStore()
    return UsageLedger(store=store, limits=UsageLimits.from_env())


ledger = create_ledger()


def _user_id_from_request():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    user_id = data.get("userId")
    if not isinstance(user_id, str) or not user_id.strip():
        return None
    return user_id


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "usage-service",
        "store": type(ledger.store).__name__,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies the store is reachable."""
    if isinstance(ledger.store, PostgresUsageRepository):
        db_health = ledger.store.connection_manager.health_check(initialize=True)
        if not db_health["healthy"]:
            return jsonify({"status": "not_ready", "reason": db_health["status"]}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/usage/check", methods=["POST"])
def check_usage():
    """Return the user's quota.

    Request Body:
        {"userId": "..."}

    Response:
        {"status": "free", "usage": 3, "limit": 20, "remaining": 17,
         "reset_date": "2025-09-01T00:00:00+00:00", "can_use": true}
    """
    user_id = _user_id_from_request()
    if user_id is None:
        return jsonify({"error": "User ID is required"}), 400

    try:
        status = ledger.check_usage(user_id)
    except RepositoryError as e:
        logger.error("USAGE_CHECK_ERROR", extra={"error": str(e), "error_type": type(e).__name__})
        return jsonify({"error": "Failed to check subscription status"}), 500

    return jsonify(status.to_dict()), 200


@app.route("/usage/increment", methods=["POST"])
def increment_usage():
    """Record one request for the user and return the updated quota."""
    user_id = _user_id_from_request()
    if user_id is None:
        return jsonify({"error": "User ID is required"}), 400

    try:
        status = ledger.increment_usage(user_id)
    except RepositoryError as e:
        logger.error("USAGE_INCREMENT_ERROR", extra={"error": str(e), "error_type": type(e).__name__})
        return jsonify({"error": "Failed to record usage"}), 500

    return jsonify(status.to_dict()), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8003"))
    app.run(host="0.0.0.0", port=port, debug=False)
