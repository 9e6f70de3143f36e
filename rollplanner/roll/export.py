import json
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Tuple

from ..utils.exceptions import ExportError
from .session import RollSession

EXPORT_FORMATS = ("json", "csv")


def build_export_data(session: RollSession, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Roll summary, shooting conditions and the frame log as plain data"""
    recommendation = session.recommendation
    exported_at = (now or datetime.now(timezone.utc)).isoformat()

    return {
        'roll': {
            'number': session.roll_number or 0,
            'film': recommendation.film if recommendation else 'Unknown',
            'iso': recommendation.ei if recommendation else 0,
            'format': session.film_format.value,
            'type': session.film_type.label,
            'loadedAt': session.loaded_at or '',
            'exportedAt': exported_at,
            'totalFrames': session.total_frames,
            'framesLogged': session.frames_logged,
        },
        'conditions': {
            'light': session.light.value if session.light else None,
            'environment': session.environment.value if session.environment else None,
            'intent': session.intent.value if session.intent else None,
        },
        'frames': [
            {
                'frameNumber': log.frame_number,
                'aperture': log.aperture,
                'shutter': log.shutter,
                'notes': log.notes,
                'timestamp': log.timestamp,
            }
            for log in session.frame_log
        ],
    }


def export_as_json(session: RollSession, now: Optional[datetime] = None) -> str:
    return json.dumps(build_export_data(session, now), indent=2)


def _loaded_date(loaded_at: str) -> Optional[date]:
    if not loaded_at:
        return None
    try:
        return datetime.fromisoformat(loaded_at).date()
    except ValueError:
        return None


def export_as_csv(session: RollSession, now: Optional[datetime] = None) -> str:
    """
    Frame log as CSV with a commented roll header

    Notes are always quoted with inner quotes doubled; the other columns
    are written as-is.
    """
    data = build_export_data(session, now)
    roll = data['roll']
    loaded = _loaded_date(roll['loadedAt'])

    lines = [
        f"# Roll {roll['number']} - {roll['film']}",
        f"# ISO {roll['iso']} | {roll['format']} {roll['type']}",
        f"# Loaded: {loaded.isoformat() if loaded else 'N/A'}",
        f"# Frames: {roll['framesLogged']} of {roll['totalFrames']} logged",
        "",
        "Frame,Aperture,Shutter,Notes,Timestamp",
    ]

    for frame in data['frames']:
        notes = (frame['notes'] or '').replace('"', '""')
        lines.append(','.join([
            str(frame['frameNumber']),
            frame['aperture'] or '',
            frame['shutter'] or '',
            f'"{notes}"',
            frame['timestamp'],
        ]))

    return '\n'.join(lines)


def generate_filename(session: RollSession, extension: str, today: Optional[date] = None) -> str:
    """roll-<n>-<film-slug>-<YYYY-MM-DD>.<ext>, dated by when the roll was loaded"""
    film = session.recommendation.film if session.recommendation else 'roll'
    slug = re.sub(r"\s+", "-", film).lower()
    loaded = _loaded_date(session.loaded_at or '')
    day = loaded or today or datetime.now(timezone.utc).date()
    return f"roll-{session.roll_number or 0}-{slug}-{day.isoformat()}.{extension}"


def export_roll(
        session: RollSession,
        export_format: str,
        now: Optional[datetime] = None
) -> Tuple[str, str]:
    """
    Encode a roll for download

    Returns:
        (filename, content)

    Raises:
        ExportError: unknown format
    """
    if export_format == 'json':
        content = export_as_json(session, now)
    elif export_format == 'csv':
        content = export_as_csv(session, now)
    else:
        raise ExportError(
            f"Unsupported export format: {export_format}",
            details={'supported': list(EXPORT_FORMATS)}
        )

    today = now.date() if now else None
    return generate_filename(session, export_format, today), content
