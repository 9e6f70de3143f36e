from .session import RollSession, FrameLog
from .export import (
    build_export_data,
    export_as_json,
    export_as_csv,
    generate_filename,
    export_roll,
)

__all__ = [
    'RollSession',
    'FrameLog',
    'build_export_data',
    'export_as_json',
    'export_as_csv',
    'generate_filename',
    'export_roll',
]
