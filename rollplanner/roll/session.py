from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from config.settings import get_settings
from ..types import (
    Environment,
    FilmFormat,
    FilmType,
    Intent,
    LightCondition,
    Recommendation,
    WeatherData,
)
from ..utils.exceptions import (
    FrameOutOfRangeError,
    InvalidFrameCountError,
    RollError,
    RollNotLockedError,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _now_iso(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


@dataclass
class FrameLog:
    """What was shot on one frame"""
    frame_number: int
    aperture: str = ""
    shutter: str = ""
    notes: str = ""
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RollSession:
    """
    One roll from conditions through loading to the last frame

    The session never persists itself: callers store `to_dict()` and
    restore with `from_dict()`.
    """
    film_type: FilmType = FilmType.COLOR
    film_format: FilmFormat = FilmFormat.SMALL
    light: Optional[LightCondition] = None
    environment: Optional[Environment] = None
    intent: Optional[Intent] = None
    weather: Optional[WeatherData] = None
    recommendation: Optional[Recommendation] = None

    locked: bool = False
    roll_number: Optional[int] = None
    locked_at: Optional[str] = None
    loaded_at: Optional[str] = None
    total_frames: int = 0
    current_frame: int = 1
    frame_log: List[FrameLog] = field(default_factory=list)

    # =========================================================================
    # Loading
    # =========================================================================

    def frame_count_options(self) -> List[int]:
        """Frame counts offered for the format, default first"""
        return get_settings().get_frame_counts(self.film_format.value)

    def lock(
            self,
            recommendation: Recommendation,
            roll_number: int,
            now: Optional[datetime] = None,
            frame_counts: Optional[Sequence[int]] = None
    ) -> 'RollSession':
        """
        Load the recommended film: start at frame 1 with the format's default count

        Raises:
            RollError: placeholder recommendation or non-positive roll number
        """
        if recommendation.is_placeholder:
            raise RollError("Cannot load a roll without a film", details={'film': recommendation.film})
        if roll_number < 1:
            raise RollError("Roll numbers start at 1", details={'roll_number': roll_number})

        options = list(frame_counts) if frame_counts is not None else self.frame_count_options()
        stamp = _now_iso(now)

        self.recommendation = recommendation
        self.locked = True
        self.roll_number = roll_number
        self.locked_at = stamp
        self.loaded_at = stamp
        self.total_frames = options[0]
        self.current_frame = 1
        self.frame_log = []

        logger.info(
            "roll_locked",
            roll_number=roll_number,
            film=recommendation.film_key or recommendation.film,
            ei=recommendation.ei,
            total_frames=self.total_frames,
        )
        return self

    def unlock(self) -> None:
        """Start over: forget the roll but keep the selected conditions"""
        self.recommendation = None
        self.locked = False
        self.roll_number = None
        self.locked_at = None
        self.loaded_at = None
        self.total_frames = 0
        self.current_frame = 1
        self.frame_log = []

    # =========================================================================
    # Frames
    # =========================================================================

    def _require_locked(self) -> None:
        if not self.locked:
            raise RollNotLockedError("No roll is loaded")

    def _check_frame(self, frame_number: int) -> None:
        if not 1 <= frame_number <= self.total_frames:
            raise FrameOutOfRangeError(
                f"Frame {frame_number} is outside 1-{self.total_frames}",
                details={'frame_number': frame_number, 'total_frames': self.total_frames}
            )

    def next_frame(self) -> int:
        self._require_locked()
        self._check_frame(self.current_frame + 1)
        self.current_frame += 1
        return self.current_frame

    def previous_frame(self) -> int:
        self._require_locked()
        self._check_frame(self.current_frame - 1)
        self.current_frame -= 1
        return self.current_frame

    def set_total_frames(self, total_frames: int, frame_counts: Optional[Sequence[int]] = None) -> None:
        """
        Switch between the counts offered for the format (e.g. 36 or 24 on 35mm)

        Raises:
            InvalidFrameCountError: count not offered, or frames already logged past it
        """
        self._require_locked()
        options = list(frame_counts) if frame_counts is not None else self.frame_count_options()

        if total_frames not in options:
            raise InvalidFrameCountError(
                f"{total_frames} frames is not offered for {self.film_format.value}",
                details={'total_frames': total_frames, 'options': options}
            )

        logged_past = [log.frame_number for log in self.frame_log if log.frame_number > total_frames]
        if logged_past:
            raise InvalidFrameCountError(
                f"Frames {logged_past} are already logged",
                details={'total_frames': total_frames, 'logged_past': logged_past}
            )

        self.total_frames = total_frames
        self.current_frame = min(self.current_frame, total_frames)

    def log_frame(
            self,
            aperture: str = "",
            shutter: str = "",
            notes: str = "",
            frame_number: Optional[int] = None,
            now: Optional[datetime] = None
    ) -> FrameLog:
        """Log (or re-log) a frame, the current one by default"""
        self._require_locked()
        number = self.current_frame if frame_number is None else frame_number
        self._check_frame(number)

        entry = FrameLog(
            frame_number=number,
            aperture=aperture,
            shutter=shutter,
            notes=notes,
            timestamp=_now_iso(now),
        )
        self.frame_log = [log for log in self.frame_log if log.frame_number != number]
        self.frame_log.append(entry)
        self.frame_log.sort(key=lambda log: log.frame_number)

        logger.debug("frame_logged", roll_number=self.roll_number, frame=number)
        return entry

    def get_frame_log(self, frame_number: Optional[int] = None) -> Optional[FrameLog]:
        number = self.current_frame if frame_number is None else frame_number
        for log in self.frame_log:
            if log.frame_number == number:
                return log
        return None

    @property
    def frames_logged(self) -> int:
        return len(self.frame_log)

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            'film_type': self.film_type.value,
            'film_format': self.film_format.value,
            'light': self.light.value if self.light else None,
            'environment': self.environment.value if self.environment else None,
            'intent': self.intent.value if self.intent else None,
            'weather': self.weather.to_dict() if self.weather else None,
            'recommendation': self.recommendation.to_dict() if self.recommendation else None,
            'locked': self.locked,
            'roll_number': self.roll_number,
            'locked_at': self.locked_at,
            'loaded_at': self.loaded_at,
            'total_frames': self.total_frames,
            'current_frame': self.current_frame,
            'frame_log': [log.to_dict() for log in self.frame_log],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RollSession':
        """
        Restore a stored session

        Raises:
            RollError: stored data does not describe a session
        """
        try:
            return cls(
                film_type=FilmType(data.get('film_type', FilmType.COLOR.value)),
                film_format=FilmFormat(data.get('film_format', FilmFormat.SMALL.value)),
                light=LightCondition(data['light']) if data.get('light') else None,
                environment=Environment(data['environment']) if data.get('environment') else None,
                intent=Intent(data['intent']) if data.get('intent') else None,
                weather=WeatherData.from_dict(data['weather']) if data.get('weather') else None,
                recommendation=(Recommendation.from_dict(data['recommendation'])
                                if data.get('recommendation') else None),
                locked=bool(data.get('locked', False)),
                roll_number=data.get('roll_number'),
                locked_at=data.get('locked_at'),
                loaded_at=data.get('loaded_at'),
                total_frames=int(data.get('total_frames', 0)),
                current_frame=int(data.get('current_frame', 1)),
                frame_log=[FrameLog(**log) for log in data.get('frame_log', [])],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RollError("Stored roll session is invalid", original_error=e) from e
