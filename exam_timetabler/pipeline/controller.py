import sys
import json
from pathlib import Path
from typing import Optional

from exam_timetabler.pipeline.actions import ActionResult, handle_generate_timetable
from exam_timetabler.utils.file_io import load_json_file, save_json_file

def run_generation(request_path: str, save_path: Optional[str] = None) -> ActionResult:

    print(f"--- STARTING TIMETABLE GENERATION: {request_path} ---")

    values = load_json_file(request_path, "Timetable request")
    if values is None:
        print(f"CRITICAL ERROR: Could not read request values from: {request_path}")
        values = {}

    result = handle_generate_timetable(values)
    payload = result.model_dump()
    print(json.dumps(payload, indent=2))

    if save_path:
        if save_json_file(Path(save_path), payload, "Timetable result"):
            print(f"Saved result to: {save_path}")

    status = "FAILED" if result.error else "FINISHED"
    print(f"\n--- TIMETABLE GENERATION {status} ---")
    return result

def print_usage():
    print("Usage:")
    print("  python -m exam_timetabler.pipeline.controller <request.json>")
    print("  python -m exam_timetabler.pipeline.controller <request.json> --save <result.json>")
    print("\nThe request file holds subjectDependencies, studentEnrollment, facultyAvailability,")
    print("roomCapacities, examDuration and optionally additionalConstraints.")

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    save_path = None
    if len(argv) == 3 and argv[1] == '--save':
        save_path = argv[2]
    elif len(argv) != 1:
        print_usage()
        return 2

    result = run_generation(argv[0], save_path=save_path)
    return 1 if result.error else 0

if __name__ == "__main__":
    sys.exit(main())
