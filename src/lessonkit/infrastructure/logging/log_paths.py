"""Log file locations for lessonkit."""

from pathlib import Path

import platformdirs


def get_log_dir() -> Path:
    """Get the system-appropriate log directory for lessonkit.

    Returns:
        Path to the log directory (created if it doesn't exist)
        - Windows: %LOCALAPPDATA%/lessonkit/Logs
        - macOS: ~/Library/Logs/lessonkit
        - Linux: ~/.local/state/lessonkit/log
    """
    log_dir = Path(platformdirs.user_log_dir("lessonkit", appauthor=False))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_main_log_path() -> Path:
    return get_log_dir() / "lessonkit.log"
