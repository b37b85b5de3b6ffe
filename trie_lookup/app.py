"""
Trie Lookup Service -- a REST API for suggest-as-you-type.

Exposes the compact-leaf prefix index as a JSON API with endpoints for
inserting entries, prefix suggestions, exact lookups, and deletion.
Built with Flask. Designed for containerized deployment.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from flask import Flask, current_app, jsonify, request

from trie_lookup.config import Settings
from trie_lookup.errors import TrieLookupError
from trie_lookup.loader import load_pairs, load_word_file
from trie_lookup.locked import LockedTrie

logger = logging.getLogger("trie-service")

MAX_KEY_LENGTH = 256

# Seed with sample data so the service is useful out-of-the-box
SEED_WORDS = [
    "algorithm", "api", "application", "array", "authentication",
    "binary", "branch", "buffer", "build", "byte",
    "cache", "callback", "class", "client", "compiler",
    "container", "cpu", "database", "debug", "deploy",
    "docker", "endpoint", "exception", "flask", "function",
    "gateway", "git", "go", "graph", "hash", "heap",
    "index", "interface", "json", "kernel", "lambda",
    "linked-list", "load-balancer", "memory", "microservice", "middleware",
    "node", "object", "parser", "pipeline", "pointer",
    "prefix-tree", "process", "queue", "recursion", "redis",
    "request", "response", "rest", "router", "runtime",
    "schema", "server", "socket", "stack", "stream",
    "thread", "token", "tree", "trie", "tuple",
    "upstream", "variable", "version", "webhook", "worker",
]


def create_app(config: Optional[dict[str, Any]] = None) -> Flask:
    """Build the Flask application around a fresh index.

    *config* overrides Flask config keys; ``SETTINGS`` may carry a
    :class:`Settings` instance and ``SEED`` may be set to ``False`` to start
    with an empty index.
    """
    config = dict(config or {})
    if "SETTINGS" not in config:
        config["SETTINGS"] = Settings.from_env()
    app = Flask(__name__)
    app.config["SEED"] = True
    app.config.update(config)

    settings: Settings = app.config["SETTINGS"]
    index = LockedTrie(settings.max_leaf_entries)
    if app.config["SEED"]:
        if settings.seed_file:
            load_word_file(index, settings.seed_file)
        else:
            load_pairs(index, ((word, word) for word in SEED_WORDS))
            logger.info("Seeded trie with %d words", len(SEED_WORDS))

    app.extensions["trie_index"] = index
    app.extensions["trie_started"] = time.time()
    _register_routes(app)
    return app


def _index() -> LockedTrie:
    return current_app.extensions["trie_index"]


def _uptime() -> float:
    return round(time.time() - current_app.extensions["trie_started"], 2)


def _query_key(name: str = "q") -> str:
    return request.args.get(name, "").strip().lower()


def _delete_value(index: LockedTrie, key: str, raw: str) -> int:
    """Delete one value given as a query string.

    The raw text is tried as JSON first (so ``1`` matches an int stored via
    ``/insert``), then as the literal string.
    """
    try:
        decoded = json.loads(raw)
    except ValueError:
        return index.delete(key, raw)
    removed = index.delete(key, decoded)
    if not removed and decoded != raw:
        removed = index.delete(key, raw)
    return removed


def _register_routes(app: Flask) -> None:

    @app.errorhandler(TrieLookupError)
    def bad_key(exc: TrieLookupError):
        return jsonify({"error": str(exc)}), 400

    # ── Health & Info ─────────────────────────────────────────────────

    @app.route("/")
    def index():
        """Landing page with API documentation."""
        return jsonify({
            "service": "Trie Lookup Service",
            "version": "2.0.0",
            "description": "REST API for suggest-as-you-type powered by a compact-leaf trie",
            "endpoints": {
                "GET  /":                      "This help page",
                "GET  /health":                "Health check",
                "GET  /stats":                 "Trie statistics",
                "GET  /suggest?q=<pfx>":       "Up to 'limit' entries whose key starts with prefix",
                "GET  /lookup?q=<key>":        "All values stored under an exact key",
                "POST /insert":                "Insert an entry  {\"key\": \"...\", \"value\": ...}",
                "DELETE /delete?q=<key>":      "Delete a key (or one value with &value=)",
            },
        })

    @app.route("/health")
    def health():
        """Liveness / readiness probe."""
        return jsonify({
            "status": "healthy",
            "uptime_seconds": _uptime(),
            "trie_size": len(_index()),
        })

    @app.route("/stats")
    def stats():
        """Trie statistics."""
        s = _index().stats()
        return jsonify({
            "total_entries": s.entries,
            "inner_nodes": s.inner_nodes,
            "compact_leaves": s.compact_leaves,
            "free_slots": s.free_slots,
            "max_leaf_entries": s.max_leaf_entries,
            "uptime_seconds": _uptime(),
        })

    # ── Core API ──────────────────────────────────────────────────────

    @app.route("/suggest")
    def suggest():
        """Return entries whose key starts with the prefix, in key order."""
        settings: Settings = current_app.config["SETTINGS"]
        q = _query_key()
        limit = request.args.get("limit", settings.default_limit, type=int)
        if limit is None or limit < 1:
            limit = settings.default_limit
        limit = min(limit, settings.max_limit)

        matches = _index().search_prefix(q, limit)
        return jsonify({
            "prefix": q,
            "count": len(matches),
            "matches": [{"key": k, "value": v} for k, v in matches],
        })

    @app.route("/lookup")
    def lookup():
        """Exact key lookup."""
        q = _query_key()
        if not q:
            return jsonify({"error": "Missing query parameter 'q'"}), 400
        values = _index().values(q)
        return jsonify({"key": q, "found": bool(values), "values": values})

    @app.route("/insert", methods=["POST"])
    def insert():
        """Insert an entry into the trie."""
        body = request.get_json(silent=True)
        if body is None:
            body = {}
        if not isinstance(body, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400
        key = body.get("key", "")
        if not isinstance(key, str):
            return jsonify({"error": "'key' must be a string"}), 400
        key = key.strip().lower()
        value = body.get("value", key)

        if not key:
            return jsonify({"error": "Missing 'key' in request body"}), 400
        if len(key) > MAX_KEY_LENGTH:
            return jsonify({"error": f"Key too long (max {MAX_KEY_LENGTH} chars)"}), 400

        index = _index()
        index.insert(key, value)
        logger.info("Inserted key=%s", key)
        return jsonify({"inserted": key, "value": value, "trie_size": len(index)}), 201

    @app.route("/delete", methods=["DELETE"])
    def delete():
        """Delete every value under a key, or one value when 'value' is given."""
        q = _query_key()
        if not q:
            return jsonify({"error": "Missing query parameter 'q'"}), 400

        index = _index()
        if "value" in request.args:
            removed = _delete_value(index, q, request.args["value"])
        else:
            removed = index.delete(q)
        if removed:
            logger.info("Deleted %d value(s) for key=%s", removed, q)
        status = 200 if removed else 404
        return jsonify({"key": q, "deleted": removed, "trie_size": len(index)}), status


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    app = create_app({"SETTINGS": settings})
    logger.info("Starting Trie Lookup Service on port %d", settings.port)
    app.run(host="0.0.0.0", port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
