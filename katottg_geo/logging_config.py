"""
Logging configuration for the KATOTTG geo application.

This module provides logging infrastructure with configurable levels,
file output, and helpers for reporting compaction phases.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime


class GeoLogger:
    """Custom logger for KATOTTG compaction and query operations."""

    def __init__(self, name: str = "katottg_geo", level: str = "INFO",
                 log_file: Optional[str] = None):
        """
        Initialize the logger.

        Args:
            name: Logger name
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional file path for log output
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))

        # Clear any existing handlers
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            self._setup_file_handler(log_file, formatter)

    def _setup_file_handler(self, log_file: str, formatter: logging.Formatter):
        """Set up file logging handler."""
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

    def info(self, message: str):
        self.logger.info(message)

    def debug(self, message: str):
        self.logger.debug(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def critical(self, message: str):
        self.logger.critical(message)

    def log_phase_start(self, phase_name: str):
        """Log the start of a processing phase."""
        self.info("-" * 40)
        self.info(f"Starting {phase_name}")
        self.info("-" * 40)

    def log_phase_complete(self, phase_name: str, count: int, duration: float):
        """Log the completion of a processing phase."""
        self.info(f"Completed {phase_name}")
        self.info(f"Records processed: {count:,}")
        self.info(f"Duration: {duration:.2f} seconds")

    def log_stage_statistics(self, stage_name: str, accepted: int, duplicates: int,
                             unresolved: int):
        """Log counters of one compaction stage."""
        total = accepted + duplicates + unresolved
        rate = (accepted / total * 100) if total > 0 else 0
        self.info(f"{stage_name} - Accepted: {accepted:,}/{total:,} ({rate:.2f}%), "
                  f"duplicates: {duplicates:,}, unresolved parent: {unresolved:,}")

    def log_compaction_complete(self, stats):
        """Log compaction completion with statistics."""
        self.info("=" * 60)
        self.info("KATOTTG COMPACTION COMPLETED")
        self.info("=" * 60)
        self.info(f"Raw records: {stats.total_records:,}")
        self.info(f"Nodes emitted: {stats.total_accepted():,}")
        self.info(f"Records skipped: {stats.total_skipped():,}")
        self.info(f"Unknown categories: {stats.unknown_category:,}")
        self.info(f"Acceptance rate: {stats.get_acceptance_rate():.2f}%")
        self.info(f"Processing time: {stats.processing_time:.2f} seconds")
        self.info(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_file_operation(self, operation: str, file_path: str, record_count: int):
        """Log file operations."""
        self.info(f"{operation}: {file_path} ({record_count:,} records)")


def setup_logging(config) -> GeoLogger:
    """
    Set up logging based on configuration.

    Args:
        config: GeoConfig instance

    Returns:
        Configured GeoLogger instance
    """
    return GeoLogger(
        name="katottg_geo",
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None
    )
