import structlog
from datetime import datetime, timezone


def custom_console_renderer_call(self, logger, method_name, event_dict):
    """Single-line console output: timestamp [level] logger event key=value ..."""

    level = event_dict.pop('level', method_name)
    event = event_dict.pop('event', '')
    timestamp = event_dict.pop('timestamp', None)
    logger_name = event_dict.pop('logger', None)

    event_dict.pop('logger_name', None)
    event_dict.pop('method', None)

    if isinstance(timestamp, datetime):
        timestamp_str = timestamp.strftime('%Y-%m-%d %H:%M:%S')
    elif isinstance(timestamp, str):
        try:
            timestamp_str = datetime.fromisoformat(timestamp.replace('Z', '+00:00')).strftime('%Y-%m-%d %H:%M:%S')
        except ValueError:
            timestamp_str = timestamp
    else:
        timestamp_str = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')

    # ANSI color codes
    colors = {
        'debug': '\033[36m',
        'info': '\033[32m',
        'warning': '\033[33m',
        'error': '\033[31m',
        'critical': '\033[31m\033[1m',
    }
    reset = '\033[0m'
    bold = '\033[1m'
    dim = '\033[2m'

    level_color = colors.get(level, '')

    parts = [
        timestamp_str,
        f"[{level_color}{bold}{level:9s}{reset}]",
    ]
    if logger_name:
        parts.append(f"{dim}{logger_name}{reset}")
    parts.append(f"{bold}{event}{reset}")

    kv_parts = [f"{k}={v}" for k, v in sorted(event_dict.items()) if not k.startswith('_')]
    if kv_parts:
        parts.append(' '.join(kv_parts))

    return ' '.join(parts)


structlog.dev.ConsoleRenderer.__call__ = custom_console_renderer_call
