import logging
import os
import threading
import traceback
import webbrowser
from datetime import datetime

from flask import Flask, current_app, jsonify, render_template_string, request, send_file

from . import auth, config
from .aggregator import search
from .exporter import EmptyExportError, build_export_sheets, write_csv, write_workbook
from .extractor import ExtractionError, extract_table
from .models import StoredFile
from .rendering import highlight_html, result_payload
from .store import FileStore
from .templates import HTML_TEMPLATE, PRINT_TEMPLATE

logger = logging.getLogger(__name__)

# ------------------------------
# Flask setup
# ------------------------------
app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = config.MAX_FILE_MB * 1024 * 1024
app.config["SECRET_KEY"] = config.SECRET_KEY
app.config["STORE_PATH"] = config.STORE_PATH
app.config["ADMIN_PASSWORD_HASH"] = config.ADMIN_PASSWORD_HASH
app.config["DISPLAY_LIMIT"] = config.DISPLAY_LIMIT

STORE_EXTENSION = "excel_search_store"

# ------------------------------
# Helpers
# ------------------------------

def get_store() -> FileStore:
    """The file store for the configured path, opened on first use."""
    store = current_app.extensions.get(STORE_EXTENSION)
    if store is None:
        store = FileStore.at_path(current_app.config["STORE_PATH"])
        current_app.extensions[STORE_EXTENSION] = store
    return store


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "Unknown"


def _display_date(stored: StoredFile) -> str:
    return stored.uploaded_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _last_upload_label(store: FileStore):
    last = store.last_uploaded()
    return _display_date(last) if last else None


def _json_error(message: str, code: int = 500):
    """Return JSON error with a compact traceback string."""
    tb = traceback.format_exc(limit=3)
    resp = jsonify({"success": False, "error": f"{message}", "trace": tb})
    resp.status_code = code
    return resp


def _query_arg() -> str:
    return request.args.get("q", "")


def _export_sheets():
    result = search(get_store().list(), _query_arg())
    return build_export_sheets(result)


def _export_name(ext: str) -> str:
    return f"{config.EXPORT_FILE_NAME}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{ext}"

# ------------------------------
# Routes
# ------------------------------

@app.route("/")
def index():
    store = get_store()
    return render_template_string(
        HTML_TEMPLATE,
        is_admin=auth.is_admin(),
        client_ip=_client_ip(),
        page_load_time=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        last_upload=_last_upload_label(store),
        accept=",".join(config.UPLOAD_EXTENSIONS),
    )


@app.route("/admin/login", methods=["POST"])
def admin_login():
    data = request.get_json(silent=True) or request.form
    if auth.login(str(data.get("password", ""))):
        return jsonify({"success": True})
    resp = jsonify({"success": False, "error": "Invalid credentials"})
    resp.status_code = 401
    return resp


@app.route("/admin/logout", methods=["POST"])
def admin_logout():
    auth.logout()
    return jsonify({"success": True})


@app.route("/files", methods=["GET"])
def list_files():
    store = get_store()
    return jsonify({
        "success": True,
        "files": [
            {"fileName": f.name, "uploadDate": _display_date(f), "rows": f.row_count}
            for f in store.list()
        ],
        "lastUpload": _last_upload_label(store),
    })


@app.route("/upload", methods=["POST"])
@auth.admin_required
def upload_files():
    uploads = request.files.getlist("files") or request.files.getlist("file")
    uploads = [f for f in uploads if f.filename]
    if not uploads:
        return jsonify({"success": False, "error": "No file selected"})

    # read the whole batch first, then update the store in input order
    items: list[dict] = []
    extracted: list[StoredFile] = []
    for f in uploads:
        name = os.path.basename(f.filename)
        try:
            stored = extract_table(f.read(), name)
        except ExtractionError as e:
            logger.warning("Upload failed for %s: %s", name, e.reason)
            items.append({"fileName": name, "status": "error", "error": e.reason})
            continue
        extracted.append(stored)
        items.append({"fileName": name, "status": "success", "rows": stored.row_count})

    try:
        get_store().upsert_many(extracted)
    except OSError as e:
        return _json_error(f"Saving uploads failed: {e}")

    logger.info("Stored %d of %d uploaded files", len(extracted), len(uploads))
    return jsonify({"success": bool(extracted), "items": items})


@app.route("/files/<path:name>", methods=["DELETE"])
@auth.admin_required
def delete_file(name: str):
    store = get_store()
    if name not in store:
        resp = jsonify({"success": False, "error": f"No file named {name}"})
        resp.status_code = 404
        return resp
    try:
        store.delete(name)
    except OSError as e:
        return _json_error(f"Delete failed: {e}")
    return jsonify({"success": True})


@app.route("/search", methods=["GET", "POST"])
def search_files():
    try:
        if request.method == "POST":
            data = request.get_json(silent=True) or {}
            query = str(data.get("query", ""))
        else:
            query = _query_arg()
        result = search(get_store().list(), query)
        payload = result_payload(result, current_app.config["DISPLAY_LIMIT"])
        payload["lastUpload"] = _last_upload_label(get_store())
        return jsonify(payload)
    except Exception as e:
        return _json_error(f"Search failed: {e}")


@app.route("/download")
def download_results():
    """Return XLSX in-memory."""
    try:
        output = write_workbook(_export_sheets())
        return send_file(output, as_attachment=True, download_name=_export_name("xlsx"))
    except EmptyExportError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        return _json_error(f"Download failed: {e}")


@app.route("/download_csv")
def download_csv():
    """Optional CSV download."""
    try:
        output = write_csv(_export_sheets())
        return send_file(output, as_attachment=True, download_name=_export_name("csv"), mimetype="text/csv")
    except EmptyExportError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        return _json_error(f"CSV export failed: {e}")


@app.route("/print")
def print_results():
    result = search(get_store().list(), _query_arg())
    return render_template_string(PRINT_TEMPLATE, result=result, highlight=highlight_html)


@app.errorhandler(413)
def too_large(_e):
    return jsonify({"success": False, "error": f"Upload exceeds {config.MAX_FILE_MB} MB"}), 413

# ------------------------------
# Dev server bootstrap
# ------------------------------

def _open_browser_delayed(url: str):
    import time
    time.sleep(1.5)
    try:
        webbrowser.open(url)
    except webbrowser.Error:
        logger.debug("Could not open a browser for %s", url)


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("🚀 Starting Excel Search Dashboard…")
    print("💾 File store:", app.config["STORE_PATH"])  # noqa: T201
    if not app.config["ADMIN_PASSWORD_HASH"]:
        print("🔒 EXCEL_SEARCH_ADMIN_PASSWORD_HASH is not set; uploads are disabled")  # noqa: T201
    import socket
    port = config.PORT
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        if s.connect_ex((config.HOST, port)) == 0:
            print(f"⚠️  Port {port} in use. Trying {port + 1}…")  # noqa: T201
            port += 1
    url = f"http://{config.HOST}:{port}/"
    print(f"🌐 Starting web server on: {url}")  # noqa: T201
    t = threading.Thread(target=_open_browser_delayed, args=(url,), daemon=True)
    t.start()
    try:
        app.run(debug=False, host=config.HOST, port=port, use_reloader=False)
    except KeyboardInterrupt:
        print("\n👋 Application stopped by user")  # noqa: T201

# expose the Flask app for gunicorn
application = app
