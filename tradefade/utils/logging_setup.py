"""JSON log formatting shared by the runner scripts."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'getMessage', 'taskName',
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with structured `extra` fields inlined."""

    def format(self, record):
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith('_'):
                log_obj[key] = value
        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


def setup_logging(log_dir: str = 'logs', prefix: str = 'game', console_level: int = logging.INFO) -> Optional[Path]:
    """
    Setup JSON logging to file plus a plain console handler.

    Args:
        log_dir: Directory for the JSON log; None disables the file handler
        prefix: Log file name prefix
        console_level: Console handler level

    Returns:
        Path of the JSON log file, or None when file logging is disabled
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / f'{prefix}_{datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")}.json'

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(file_handler)

    return log_file
