import datetime
from pathlib import Path
from typing import Union

from exam_timetabler.models.schemas import ExamTimetableOutput, TimetableRequest
from exam_timetabler.utils.file_io import save_json_file

class TimetableArchive:
    @staticmethod
    def save(archive_dir: Union[str, Path], output: ExamTimetableOutput, inputs: TimetableRequest) -> Path:
        """Writes one generated timetable, with the inputs that produced it, as a JSON document."""
        now = datetime.datetime.now()
        path = Path(archive_dir) / f"timetable_{now.strftime('%Y%m%d_%H%M%S_%f')}.json"

        document = {
            "name": f"Timetable - {now.strftime('%Y-%m-%d %H:%M:%S')}",
            "timetable": [e.model_dump(by_alias=True, exclude_none=True) for e in output.timetable],
            "conflicts": output.conflicts or "",
            "createdAt": now.isoformat(),
            "inputs": inputs.model_dump(by_alias=True),
        }

        if not save_json_file(path, document, "Timetable archive"):
            raise OSError(f"Could not write timetable archive to {path}")
        return path
