"""
Logging configuration for the Arc Folder Archiver.

This module sets up a timestamped log file plus console output.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


def setup_logging(
    log_file: Optional[str] = None,
    verbose: bool = False,
    log_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Set up logging configuration.

    Args:
        log_file: Optional log file name override
        verbose: Log DEBUG messages to the console as well
        log_dir: Directory for log files (defaults to ./logs)

    Returns:
        Path of the log file in use
    """
    if log_file is None:
        log_file = "arc_archiver.log"

    if log_dir is None:
        if getattr(sys, "frozen", False):
            # Running as executable
            app_dir = Path(sys.executable).parent
        else:
            app_dir = Path.cwd()
        log_dir = app_dir / "logs"

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = log_dir / f"{Path(log_file).stem}_{timestamp}.log"

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    handlers = []

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(log_format, date_format))
    handlers.append(file_handler)

    # Console output goes to stderr so rendered folders on stdout stay clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    handlers.append(console_handler)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    logger = logging.getLogger(__name__)
    logger.info(f"Arc Folder Archiver starting - Log file: {log_path}")

    # Reduce noise from some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    return log_path
