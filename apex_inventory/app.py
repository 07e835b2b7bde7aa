"""Flask application exposing the inventory commands and views as a JSON API."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request

from .config import Settings, get_settings
from .csv_import import TEMPLATE_FILENAME, MalformedFileError, csv_template, import_csv
from .export import inventory_workbook
from .inventory import InventoryManager
from .logger import setup_logger
from .storage import PersistenceError, SnapshotStore
from .validation import validate_item_form
from .views import category_quantities, stock_alerts, summarize, visible_items

logger = logging.getLogger(__name__)

EXTENSION_KEY = "apex_inventory"


def create_app(
    storage_path: str | Path | None = None,
    settings: Optional[Settings] = None,
) -> Flask:
    settings = settings or get_settings()
    if storage_path is not None:
        settings = settings.model_copy(update={"storage_path": Path(storage_path)})
    setup_logger(settings.log_level, settings.log_file, settings.environment)

    app = Flask(__name__)
    app.config["APP_NAME"] = settings.app_name

    manager = InventoryManager(
        store=SnapshotStore(settings.storage_path),
        max_log_entries=settings.max_log_entries,
    )
    manager.initialize()
    app.extensions[EXTENSION_KEY] = manager
    threshold = settings.low_stock_threshold

    def _read_upload() -> Optional[bytes]:
        upload = request.files.get("file")
        if upload is None or upload.filename == "":
            return None
        try:
            return upload.read()
        finally:
            upload.close()

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError) -> Any:
        return _json_error("Could not save inventory", 500)

    @app.get("/api/items")
    def list_items() -> Any:
        try:
            items = visible_items(
                manager.items,
                request.args.get("q", ""),
                request.args.get("sort", "name"),
                request.args.get("direction", "asc"),
            )
        except ValueError as exc:
            return _json_error(str(exc))
        return jsonify([item.to_dict() for item in items])

    @app.post("/api/items")
    def add_item() -> Any:
        payload = _get_payload(request)
        fields, errors = validate_item_form(payload, manager.existing_skus())
        if fields is None:
            return _json_error("Invalid item", errors=errors)
        item = manager.create(fields)
        return jsonify(item.to_dict()), 201

    @app.put("/api/items/<string:item_id>")
    def update_item(item_id: str) -> Any:
        if manager.get(item_id) is None:
            return _json_error(f"Item '{item_id}' not found", 404)
        payload = _get_payload(request)
        fields, errors = validate_item_form(
            payload, manager.existing_skus(exclude_id=item_id)
        )
        if fields is None:
            return _json_error("Invalid item", errors=errors)
        manager.update(item_id, fields)
        updated = manager.get(item_id)
        return jsonify(updated.to_dict() if updated is not None else {})

    @app.delete("/api/items/<string:item_id>")
    def delete_item(item_id: str) -> Any:
        item = manager.get(item_id)
        if item is None:
            return _json_error(f"Item '{item_id}' not found", 404)
        manager.delete(item_id, item.name)
        return "", 204

    @app.post("/api/items/bulk-delete")
    def bulk_delete_items() -> Any:
        payload = _get_payload(request)
        ids = payload.get("ids")
        if not isinstance(ids, list) or not all(isinstance(value, str) for value in ids):
            return _json_error("Field 'ids' must be a list of item ids")
        if not ids:
            return _json_error("No items selected")
        removed = manager.bulk_delete(ids)
        return jsonify({"deleted": removed})

    @app.get("/api/history")
    def list_history() -> Any:
        return jsonify([entry.to_record() for entry in manager.log])

    @app.post("/api/history/clear")
    def clear_history() -> Any:
        manager.clear_log()
        return "", 204

    @app.get("/api/summary")
    def inventory_summary() -> Any:
        items = manager.items
        return jsonify(
            {
                "summary": summarize(items, threshold).to_dict(),
                "alerts": [alert.to_dict() for alert in stock_alerts(items, threshold)],
                "categories": category_quantities(items),
            }
        )

    @app.post("/api/items/import/preview")
    def preview_import() -> Any:
        data = _read_upload()
        if data is None:
            return _json_error("Missing upload file")
        try:
            result = import_csv(data, manager.existing_skus())
        except MalformedFileError as exc:
            logger.warning("Rejected CSV upload: %s", exc)
            return _json_error("Failed to parse CSV file")
        return jsonify(result.to_dict())

    @app.post("/api/items/import")
    def import_items() -> Any:
        data = _read_upload()
        if data is None:
            return _json_error("Missing upload file")
        try:
            result = import_csv(data, manager.existing_skus())
        except MalformedFileError as exc:
            logger.warning("Rejected CSV upload: %s", exc)
            return _json_error("Failed to parse CSV file")
        valid_items = result.valid_items()
        imported = manager.bulk_add(valid_items) if valid_items else []
        return jsonify(
            {
                "result": result.to_dict(),
                "imported": [item.to_dict() for item in imported],
                "count": len(imported),
            }
        )

    @app.get("/api/items/template")
    def download_template() -> Response:
        response = Response(csv_template(), mimetype="text/csv")
        response.headers["Content-Disposition"] = f"attachment; filename={TEMPLATE_FILENAME}"
        return response

    @app.get("/api/items/export")
    def export_inventory() -> Response:
        items = manager.items
        content = inventory_workbook(
            items,
            summarize(items, threshold),
            exported_at=datetime.now().astimezone(),
            threshold=threshold,
        )
        return _xls_response(content, _timestamped_filename("inventory_export"))

    return app


def get_manager(app: Flask) -> InventoryManager:
    return app.extensions[EXTENSION_KEY]


def _json_error(
    message: str,
    status: int = 400,
    *,
    errors: Optional[Dict[str, str]] = None,
) -> Any:
    payload: Dict[str, Any] = {"error": message}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status


def _get_payload(req: Any) -> Dict[str, Any]:
    if req.is_json:
        payload = req.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}
    if req.form:
        return req.form.to_dict()
    payload = req.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _xls_response(content: bytes, filename: str) -> Response:
    response = Response(content, mimetype="application/vnd.ms-excel")
    response.headers["Content-Disposition"] = f"attachment; filename={filename}.xls"
    return response


def _timestamped_filename(prefix: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return f"{prefix}_{timestamp}"
