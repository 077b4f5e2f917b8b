"""Flask REST API exposing the in-memory expense store."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from expense_index.config import StoreSettings
from expense_index.exceptions import RecordNotFoundError, ValidationError
from expense_index.logging_utils import configure_logging
from expense_index.models import format_amount
from expense_index.store import ExpenseStore
from expense_index.validators import validate_count


def create_app(
    store: Optional[ExpenseStore] = None, settings: Optional[StoreSettings] = None
) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("EXPENSE_TRACKER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("EXPENSE_TRACKER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    if store is None:
        settings = settings or StoreSettings.from_env()
        store = ExpenseStore(settings)
    configure_logging(store.settings.log_level_value)

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _flag(name: str) -> bool:
        return (request.args.get(name) or "").strip().lower() in {"1", "true", "yes"}

    @app.get("/expenses")
    def list_expenses():
        include_deleted = _flag("include_deleted")
        entries = [entry for entry in store.list() if include_deleted or not entry.deleted]
        return _success({"items": [entry.to_dict() for entry in entries]})

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        position = store.add(payload.get("amount"), payload.get("category"), payload.get("date"))
        return _success(store.get(position).to_dict(), 201)

    @app.get("/expenses/<int:position>")
    def get_expense(position: int):
        return _success(store.get(position).to_dict())

    @app.delete("/expenses/<int:position>")
    def delete_expense(position: int):
        store.delete(position)
        return _success({}, 204)

    @app.get("/expenses/top")
    def top_expenses():
        count = validate_count(request.args.get("n", "5"))
        expenses = store.top_n(count)
        return _success({"items": [expense.to_dict() for expense in expenses]})

    @app.get("/categories/totals")
    def category_totals():
        totals = store.category_totals()
        return _success({"totals": {name: format_amount(total) for name, total in totals.items()}})

    @app.get("/categories/<category>/expenses")
    def expenses_for_category(category: str):
        selection = store.filter_by_category(category)
        return _success({
            "found": selection.found,
            "items": [expense.to_dict() for expense in selection],
        })

    @app.get("/dates/<date>/expenses")
    def expenses_for_date(date: str):
        selection = store.filter_by_date(date)
        return _success({
            "found": selection.found,
            "items": [expense.to_dict() for expense in selection],
        })

    @app.get("/dates")
    def expenses_between_dates():
        start = request.args.get("start")
        end = request.args.get("end")
        if not start or not end:
            raise ValidationError("start and end query parameters are required")
        expenses = store.filter_by_date_range(start, end)
        return _success({"items": [expense.to_dict() for expense in expenses]})

    @app.post("/maintenance/sort-by-date")
    def sort_by_date():
        store.sort_by_date()
        return _success({"records": len(store)})

    @app.post("/maintenance/compact")
    def compact():
        removed = store.compact()
        return _success({"removed": removed, "records": len(store)})

    @app.get("/stats")
    def stats():
        return _success(store.stats().to_dict())

    return app
