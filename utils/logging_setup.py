"""
Logging for sample-game sessions: one timestamped directory per session
holding ``games.log`` and the result files.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Tuple

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_file: Path, level: int = logging.INFO) -> None:
    """
    Route the root logger to ``log_file`` and the console.

    Handlers from an earlier call are closed and replaced, so a second
    session in the same process does not write to the first one's file.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    for handler in (logging.FileHandler(log_file, mode='w', encoding='utf-8'), logging.StreamHandler()):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def create_run_directory(base_dir: Path, session_name: str) -> Path:
    """Create ``<base_dir>/<YYYYMMDD>_<HHMMSS>_<session_name>/``."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = base_dir / f"{timestamp}_{session_name}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def setup_session_logging(base_dir: Path, session_name: str, level: int = logging.INFO) -> Tuple[Path, Path]:
    """
    Create a session directory and log to ``<session>/games.log``.

    Returns:
        Tuple of (run_directory, log_file_path)
    """
    run_dir = create_run_directory(base_dir, session_name)
    log_file = run_dir / "games.log"
    setup_logging(log_file, level)
    return run_dir, log_file
