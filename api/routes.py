import json
from flask import request, jsonify

from aggregator import aggregate_events
from summary import build_summary
from schema import InputShapeError
from loader import merge_documents
from config import build_policy


def _documents_from_request():
    """
    Either multipart "files" uploads, or a JSON body holding one document
    (array or {"entries": [...]}) or {"documents": [...]}.
    """
    uploads = request.files.getlist("files")
    if uploads:
        documents = []
        for f in uploads:
            if not (f.filename or "").endswith(".json"):
                print(f"Skipping upload {f.filename}: not a .json file")
                continue
            try:
                documents.append(json.loads(f.read().decode("utf-8")))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise InputShapeError(f"{f.filename}: invalid JSON") from e
        return documents

    payload = request.get_json(force=True)
    if isinstance(payload, dict) and isinstance(payload.get("documents"), list):
        return payload["documents"]
    return [payload]


def register_routes(app, policy=None):
    if policy is None:
        policy = build_policy()

    @app.after_request
    def add_cors_headers(resp):
        resp.headers["Access-Control-Allow-Origin"] = "*"
        resp.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
        resp.headers["Access-Control-Allow-Headers"] = "content-type"
        return resp

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "ok": True,
            "source_tag": policy.source_tag,
            "average_minutes": {c.value: m for c, m in policy.average_minutes.items()},
        }), 200

    @app.route("/stats", methods=["OPTIONS"])
    def stats_options():
        return ("", 204)

    @app.route("/stats", methods=["POST"])
    def stats():
        try:
            documents = _documents_from_request()
        except InputShapeError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        except Exception:
            return jsonify({"ok": False, "error": "Invalid JSON"}), 400

        top = request.args.get("top", type=int)
        if top is not None and top < 0:
            return jsonify({"ok": False, "error": "top must be 0 or more"}), 400

        print(f"=== /stats called: documents={len(documents)} ===")

        try:
            merged = merge_documents(documents)
        except InputShapeError as e:
            print(f"Rejected upload: {e}")
            return jsonify({"ok": False, "error": str(e)}), 400

        result = aggregate_events(merged.events, policy)

        print(f"Aggregated: accepted={merged.accepted} rejected={merged.rejected} "
              f"duplicates={merged.duplicates} videos={result.long_form.event_count} "
              f"shorts={result.short_form.event_count}")

        return jsonify({
            "ok": True,
            "accepted": merged.accepted,
            "rejected": merged.rejected,
            "duplicates": merged.duplicates,
            "errors": merged.errors,
            "empty": result.is_empty,
            "stats": build_summary(result, top=top),
        }), 200
