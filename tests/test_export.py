import json
from datetime import date, datetime, timezone

import pytest

from rollplanner.roll.export import (
    build_export_data,
    export_as_csv,
    export_as_json,
    export_roll,
    generate_filename,
)
from rollplanner.roll.session import RollSession
from rollplanner.utils.exceptions import ExportError

EXPORTED_AT = datetime(2024, 6, 2, 9, 0, tzinfo=timezone.utc)
SHOT_AT = datetime(2024, 6, 1, 10, 5, tzinfo=timezone.utc)


@pytest.fixture
def shot_session(locked_session):
    locked_session.log_frame("f/8", "1/125", 'She said "hi"', now=SHOT_AT)
    locked_session.log_frame("f/2.8", "1/30", "", frame_number=3, now=SHOT_AT)
    return locked_session


class TestExportData:

    def test_roll_summary(self, shot_session):
        data = build_export_data(shot_session, now=EXPORTED_AT)

        assert data["roll"] == {
            "number": 3,
            "film": "Kodak Portra 400",
            "iso": 800,
            "format": "35mm",
            "type": "Colour",
            "loadedAt": "2024-06-01T10:00:00+00:00",
            "exportedAt": "2024-06-02T09:00:00+00:00",
            "totalFrames": 36,
            "framesLogged": 2,
        }
        assert data["conditions"] == {"light": "dim", "environment": "street", "intent": "documentary"}
        assert [f["frameNumber"] for f in data["frames"]] == [1, 3]

    def test_json_is_indented(self, shot_session):
        text = export_as_json(shot_session, now=EXPORTED_AT)

        assert text.startswith('{\n  "roll": {\n    "number": 3')
        assert json.loads(text)["frames"][0]["notes"] == 'She said "hi"'


class TestCsvExport:

    def test_layout(self, shot_session):
        lines = export_as_csv(shot_session, now=EXPORTED_AT).split("\n")

        assert lines == [
            "# Roll 3 - Kodak Portra 400",
            "# ISO 800 | 35mm Colour",
            "# Loaded: 2024-06-01",
            "# Frames: 2 of 36 logged",
            "",
            "Frame,Aperture,Shutter,Notes,Timestamp",
            '1,f/8,1/125,"She said ""hi""",2024-06-01T10:05:00+00:00',
            '3,f/2.8,1/30,"",2024-06-01T10:05:00+00:00',
        ]

    def test_unloaded_roll(self):
        lines = export_as_csv(RollSession(), now=EXPORTED_AT).split("\n")

        assert lines[0] == "# Roll 0 - Unknown"
        assert lines[2] == "# Loaded: N/A"
        assert lines[-1] == "Frame,Aperture,Shutter,Notes,Timestamp"


class TestFilenames:

    def test_named_after_film_and_load_date(self, locked_session):
        assert generate_filename(locked_session, "csv") == "roll-3-kodak-portra-400-2024-06-01.csv"

    def test_unloaded_roll_uses_today(self):
        assert generate_filename(RollSession(), "json", today=date(2024, 7, 4)) == "roll-0-roll-2024-07-04.json"

    def test_export_roll(self, shot_session):
        filename, content = export_roll(shot_session, "json", now=EXPORTED_AT)

        assert filename == "roll-3-kodak-portra-400-2024-06-01.json"
        assert json.loads(content)["roll"]["framesLogged"] == 2

    def test_unknown_format(self, shot_session):
        with pytest.raises(ExportError):
            export_roll(shot_session, "xlsx")
