from typing import Optional, Any, Dict


class RollPlannerError(Exception):
    """Base exception for all Roll Planner errors"""

    def __init__(
            self,
            message,
            error_code: Optional[str] = None,
            details: Optional[Dict[str, Any]] = None,
            original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.original_error = original_error
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception into a dictionary."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'details': self.details,
            'original_error': str(self.original_error) if self.original_error else None
        }


class ConfigurationError(RollPlannerError):
    """Configuration and settings related errors."""
    pass


class CatalogError(RollPlannerError):
    """Film catalog related errors."""
    pass


class FilmNotFoundError(CatalogError):
    """Unknown film key."""
    pass


class WeatherError(RollPlannerError):
    """Base class for weather collaborator errors."""
    pass


class WeatherFetchError(WeatherError):
    """Forecast request failed or returned an unusable payload."""
    pass


class GeocodingError(WeatherError):
    """Forward or reverse geocoding failed."""
    pass


class RollError(RollPlannerError):
    """Base class for roll session errors."""
    pass


class RollNotLockedError(RollError):
    """Frame operation on a roll that has not been locked."""
    pass


class FrameOutOfRangeError(RollError):
    """Frame number outside 1..total_frames."""
    pass


class InvalidFrameCountError(RollError):
    """Frame count not offered for the roll's format."""
    pass


class ExportError(RollPlannerError):
    """Frame log export errors."""
    pass
