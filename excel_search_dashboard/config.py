import os
import tempfile

# ------------------------------
# Configuration
# ------------------------------
# Every value can be overridden with an EXCEL_SEARCH_* environment variable.

MAX_FILE_MB = int(os.environ.get("EXCEL_SEARCH_MAX_FILE_MB", "16"))
DISPLAY_LIMIT = int(os.environ.get("EXCEL_SEARCH_DISPLAY_LIMIT", "500"))  # rows rendered per file

UPLOAD_EXTENSIONS = (".xlsx", ".xls", ".csv")

FIELD_DELIMITER = "\t"
ROW_DELIMITER = "\n"

STORE_PATH = os.environ.get(
    "EXCEL_SEARCH_STORE_PATH",
    os.path.join(tempfile.gettempdir(), "excel_search_dashboard", "excelFilesData.json"),
)

# werkzeug.security hash; the admin panel stays locked when unset
ADMIN_PASSWORD_HASH = os.environ.get("EXCEL_SEARCH_ADMIN_PASSWORD_HASH", "")
SECRET_KEY = os.environ.get("EXCEL_SEARCH_SECRET_KEY") or os.urandom(24).hex()

LOG_LEVEL = os.environ.get("EXCEL_SEARCH_LOG_LEVEL", "INFO").upper()

HOST = os.environ.get("EXCEL_SEARCH_HOST", "127.0.0.1")
PORT = int(os.environ.get("EXCEL_SEARCH_PORT", "5000"))

EXPORT_FILE_NAME = "search_results"
