from . import utils
from . import catalog
from . import recommendation
from . import weather
from . import roll

__version__ = "1.2.0"

__all__ = [
    "utils",
    "catalog",
    "recommendation",
    "weather",
    "roll",
]
