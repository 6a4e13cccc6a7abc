import json
import re
from pathlib import Path
from typing import Any, Optional, Union

def load_json_file(filepath: Union[str, Path], entity_name: str = "JSON file") -> Optional[Any]:
    """Loads a JSON file, returning None when it is missing or undecodable."""
    path = Path(filepath)
    if not path.exists():
        print(f"ERROR: Cannot load {entity_name}. File not found at: {path}")
        return None
    try:
        with open(path, "r", encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        print(f"ERROR: Failed to decode {entity_name} from {path}: {e}")
        return None

def save_json_file(filepath: Union[str, Path], data: Any, entity_name: str = "JSON file") -> bool:
    """Saves data to a JSON file, creating parent directories as needed."""
    try:
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding='utf-8') as f:
            json.dump(data, f, indent=4, default=str)
        return True
    except (OSError, TypeError) as e:
        print(f"ERROR: Failed to save {entity_name} to {filepath}: {e}")
        return False

def load_text_file(filepath: Union[str, Path], entity_name: str = "Text file") -> Optional[str]:
    """Loads a plain text file."""
    path = Path(filepath)
    if not path.exists():
        print(f"ERROR: Cannot load {entity_name}. File not found at: {path}")
        return None
    with open(path, "r", encoding='utf-8') as f:
        return f.read()

def extract_json_from_response(raw_text: str) -> Optional[str]:
    """
    Pulls the JSON document out of an LLM response string.
    Handles markdown code fences and conversational text around the payload.
    Returns the JSON text (not parsed), or None if nothing JSON-like is found.
    """
    if not isinstance(raw_text, str):
        return None

    # Fenced block first: ```json ... ``` or ``` ... ```
    match = re.search(r'```(?:json)?\s*([\s\S]*?)\s*```', raw_text, re.DOTALL)
    if match:
        return match.group(1)

    start_brace = raw_text.find('{')
    start_bracket = raw_text.find('[')
    if start_brace == -1 and start_bracket == -1:
        return None

    if start_bracket != -1 and (start_brace == -1 or start_bracket < start_brace):
        start_index = start_bracket
        end_index = raw_text.rfind(']')
    else:
        start_index = start_brace
        end_index = raw_text.rfind('}')

    if end_index < start_index:
        return None
    return raw_text[start_index : end_index + 1]
