from datetime import datetime, timezone

import pytest

from rollplanner.types import FilmFormat, Recommendation
from rollplanner.roll.session import RollSession
from rollplanner.utils.exceptions import (
    FrameOutOfRangeError,
    InvalidFrameCountError,
    RollError,
    RollNotLockedError,
)

SHOT_AT = datetime(2024, 6, 1, 10, 5, tzinfo=timezone.utc)


class TestLocking:
    """Loading a roll from a recommendation"""

    def test_lock_starts_at_frame_one(self, locked_session, loaded_at):
        assert locked_session.locked is True
        assert locked_session.roll_number == 3
        assert locked_session.current_frame == 1
        assert locked_session.total_frames == 36
        assert locked_session.locked_at == loaded_at.isoformat()
        assert locked_session.loaded_at == loaded_at.isoformat()
        assert locked_session.frame_log == []

    def test_medium_format_defaults_to_twelve(self, recommendation):
        session = RollSession(film_format=FilmFormat.MEDIUM).lock(recommendation, roll_number=1)

        assert session.total_frames == 12

    def test_placeholder_cannot_be_loaded(self):
        with pytest.raises(RollError):
            RollSession().lock(Recommendation.no_film_available(), roll_number=1)

    def test_roll_number_must_be_positive(self, recommendation):
        with pytest.raises(RollError):
            RollSession().lock(recommendation, roll_number=0)

    def test_unlock_keeps_conditions(self, locked_session):
        locked_session.log_frame("f/8", "1/125")
        locked_session.unlock()

        assert locked_session.locked is False
        assert locked_session.frame_log == []
        assert locked_session.environment is not None

    def test_unlocked_roll_rejects_frame_operations(self):
        session = RollSession()

        with pytest.raises(RollNotLockedError):
            session.log_frame("f/8", "1/125")
        with pytest.raises(RollNotLockedError):
            session.next_frame()


class TestFrames:
    """Frame counter and frame log"""

    def test_next_and_previous(self, locked_session):
        assert locked_session.next_frame() == 2
        assert locked_session.next_frame() == 3
        assert locked_session.previous_frame() == 2

    def test_previous_frame_stops_at_one(self, locked_session):
        with pytest.raises(FrameOutOfRangeError):
            locked_session.previous_frame()

        assert locked_session.current_frame == 1

    def test_next_frame_stops_at_total(self, locked_session):
        locked_session.set_total_frames(24)
        locked_session.current_frame = 24

        with pytest.raises(FrameOutOfRangeError):
            locked_session.next_frame()

    def test_log_current_frame(self, locked_session):
        locked_session.next_frame()

        entry = locked_session.log_frame("f/8", "1/125", "Corner shop", now=SHOT_AT)

        assert entry.frame_number == 2
        assert entry.timestamp == SHOT_AT.isoformat()
        assert locked_session.get_frame_log() == entry
        assert locked_session.get_frame_log(1) is None

    def test_relogging_replaces_entry(self, locked_session):
        locked_session.log_frame("f/8", "1/125", frame_number=5)
        locked_session.log_frame("f/2.8", "1/60", frame_number=5)
        locked_session.log_frame("f/4", "1/30", frame_number=2)

        assert [log.frame_number for log in locked_session.frame_log] == [2, 5]
        assert locked_session.get_frame_log(5).aperture == "f/2.8"
        assert locked_session.frames_logged == 2

    @pytest.mark.parametrize("frame_number", [0, 37])
    def test_log_out_of_range(self, locked_session, frame_number):
        with pytest.raises(FrameOutOfRangeError):
            locked_session.log_frame("f/8", "1/125", frame_number=frame_number)

    def test_set_total_frames(self, locked_session):
        locked_session.current_frame = 30

        locked_session.set_total_frames(24)

        assert locked_session.total_frames == 24
        assert locked_session.current_frame == 24

    def test_frame_count_must_be_offered(self, locked_session):
        with pytest.raises(InvalidFrameCountError):
            locked_session.set_total_frames(12)

    def test_cannot_shrink_below_logged_frames(self, locked_session):
        locked_session.log_frame("f/8", "1/125", frame_number=30)

        with pytest.raises(InvalidFrameCountError):
            locked_session.set_total_frames(24)


class TestPersistence:

    def test_round_trip(self, locked_session, make_weather):
        locked_session.weather = make_weather()
        locked_session.log_frame("f/8", "1/125", "Corner shop", now=SHOT_AT)

        restored = RollSession.from_dict(locked_session.to_dict())

        assert restored == locked_session

    def test_invalid_data_raises(self):
        with pytest.raises(RollError):
            RollSession.from_dict({"film_format": "110"})
