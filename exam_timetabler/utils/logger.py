import json
import datetime
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .config import LOG_DIR

class DetailedLogger:
    """
    A centralized logger that saves logs to a structured directory.
    - Creates a main run log and a separate log for raw LLM responses.
    - Creates a separate log for LLM thought summaries.
    - Organizes logs into subdirectories per agent: log/{agent_name}/{run_name}/
    """
    _instances: Dict[Tuple[str, str, str], "DetailedLogger"] = {}
    _instances_lock = threading.Lock()

    def __new__(cls, agent_name: str, run_name: str, log_dir: Optional[Union[str, Path]] = None):
        # One instance per (agent, run, directory) so every component of a run
        # appends to the same files.
        key = (agent_name, run_name, str(log_dir or LOG_DIR))
        with cls._instances_lock:
            instance = cls._instances.get(key)
            if instance is None:
                instance = super(DetailedLogger, cls).__new__(cls)
                instance._setup(agent_name, run_name, Path(log_dir or LOG_DIR))
                cls._instances[key] = instance
        return instance

    def _setup(self, agent_name: str, run_name: str, log_root: Path):
        self.agent_name = agent_name
        self.run_name = run_name

        self.log_dir = log_root / agent_name / run_name
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file_main = self.log_dir / "run_main.log"
        self.log_file_llm_responses = self.log_dir / "llm_raw_responses.log"
        self.log_file_llm_thoughts = self.log_dir / "llm_thoughts.log"

    def log(self, message_type: str, data: dict):
        """
        Logs a message to the console and the appropriate log file.

        Args:
            message_type (str): The category of the log (e.g., "INFO", "ERROR", "LLM_RAW_OUTPUT_TEXT").
            data (dict): The data to be logged. Should contain a 'summary' key for console output.
        """
        log_entry = {
            "timestamp": datetime.datetime.now().isoformat(),
            "type": message_type,
            "data": data
        }

        summary = data.get('summary', str(data))
        print(f"LOG [{self.agent_name.upper()}|{message_type}]: {summary}")

        if message_type == "LLM_RAW_OUTPUT_TEXT":
            self._write_to_file(self.log_file_llm_responses, self._format_llm_log(data, "RAW RESPONSE"))
        elif message_type == "LLM_THOUGHT_SUMMARY":
            self._write_to_file(self.log_file_llm_thoughts, self._format_llm_log(data, "THOUGHT SUMMARY"))
        else:
            self._write_to_file(self.log_file_main, json.dumps(log_entry, indent=2, default=str) + "\n---\n")

    def _format_llm_log(self, data: dict, log_type: str) -> str:
        """Formats LLM-specific log entries for readability."""
        timestamp = datetime.datetime.now().isoformat()
        header = f"--- {log_type} | Request: {data.get('request_id', 'N/A')} @ {timestamp} ---\n"
        content = data.get("raw_response_str") or data.get("thought_summary") or "No content."
        footer = f"\n--- END {log_type} ---\n\n"
        return header + content + footer

    def _write_to_file(self, filepath: Path, content: str):
        """Appends content to a specified file."""
        try:
            with open(filepath, "a", encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            print(f"CRITICAL: Failed to write to log file {filepath}: {e}")
