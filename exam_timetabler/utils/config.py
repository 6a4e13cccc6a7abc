import os
import datetime
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# --- Core Path Configuration ---
PACKAGE_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT = PACKAGE_ROOT.parent

# Load environment variables from a .env file at the project root.
# Values already present in the process environment win.
dotenv_path = PROJECT_ROOT / '.env'
load_dotenv(dotenv_path=dotenv_path)

# --- API and Model Configuration ---
GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY")
IS_GEMINI_CONFIGURED = bool(GOOGLE_API_KEY)

# Centralized model names
TIMETABLE_MODEL_NAME = os.environ.get("EXAM_TIMETABLER_MODEL", "gemini-2.5-flash")
CSV_MAPPER_MODEL_NAME = os.environ.get("EXAM_TIMETABLER_CSV_MODEL", TIMETABLE_MODEL_NAME)
ACADEMIC_ANALYZER_MODEL_NAME = os.environ.get("EXAM_TIMETABLER_ANALYZER_MODEL", TIMETABLE_MODEL_NAME)

# --- Directory Paths ---
LOG_DIR = Path(os.environ.get("EXAM_TIMETABLER_LOG_DIR", PROJECT_ROOT / "log"))
PROMPT_DIR = PACKAGE_ROOT / "prompt"
OUTPUT_DIR = Path(os.environ.get("EXAM_TIMETABLER_OUTPUT_DIR", PROJECT_ROOT / "output"))

# Generated timetables are archived here when set; unset disables archiving.
_archive_dir = os.environ.get("EXAM_TIMETABLER_ARCHIVE_DIR")
TIMETABLE_ARCHIVE_DIR: Optional[Path] = Path(_archive_dir) if _archive_dir else None

# --- Prompt File Paths ---
TIMETABLE_PROMPT_FILE = PROMPT_DIR / "timetable_prompt" / "timetable.txt"
CSV_MAPPER_PROMPT_FILE = PROMPT_DIR / "csv_mapper_prompt" / "csv_mapper.txt"
ACADEMIC_ANALYZER_PROMPT_FILE = PROMPT_DIR / "academic_analyzer_prompt" / "academic_analyzer.txt"

# --- Import Field Definitions ---
# Target fields offered to the header mapper for staff CSV imports.
STAFF_IMPORT_FIELDS = [
    "name",
    "email",
    "phone",
    "position",
    "college_name",
    "department_name",
]

# Document types the academic data analyzer accepts as inline uploads.
SUPPORTED_DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/webp",
    "text/plain",
    "text/csv",
}

# --- Initial Check ---
if not GOOGLE_API_KEY:
    print("WARNING: GOOGLE_API_KEY is not set. Timetable generation calls will fail.")


def get_run_name(prefix: str) -> str:
    """Builds a timestamped run name used to group the log files of one process."""
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}"

# Computed once per process: every logger of this process writes under the same run.
RUN_NAME = get_run_name("run")
