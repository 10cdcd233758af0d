"""
Configuration management for the KATOTTG geo application.

This module provides dataclasses for application configuration (file paths,
logging, search parameters) and for compaction statistics.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import os

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class GeoConfig:
    """Configuration class for compaction and query parameters."""

    # Raw dataset or snapshot to read
    input_file: str

    # Snapshot destination for the compaction step
    output_file: Optional[str] = None

    # Progress bars during compaction
    show_progress: bool = True

    # Fuzzy name search
    fuzzy_threshold: int = 85
    max_fuzzy_results: int = 10

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_paths()
        self._validate_log_level()
        self._validate_search_settings()

    def _validate_paths(self):
        """Validate that the input file exists."""
        if not os.path.exists(self.input_file):
            raise FileNotFoundError(f"Input file not found: {self.input_file}")

    def _validate_log_level(self):
        self.log_level = str(self.log_level).upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}",
                config_key='log_level',
                config_value=self.log_level,
                valid_values=VALID_LOG_LEVELS
            )

    def _validate_search_settings(self):
        """Validate fuzzy search threshold and result limit."""
        if not 0 <= self.fuzzy_threshold <= 100:
            raise ConfigurationError(
                f"Fuzzy threshold must be between 0 and 100: {self.fuzzy_threshold}",
                config_key='fuzzy_threshold',
                config_value=self.fuzzy_threshold
            )

        if self.max_fuzzy_results <= 0:
            raise ConfigurationError(
                f"Maximum fuzzy results must be positive: {self.max_fuzzy_results}",
                config_key='max_fuzzy_results',
                config_value=self.max_fuzzy_results
            )

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'GeoConfig':
        """Create configuration from dictionary."""
        return cls(**config_dict)

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return {
            'input_file': self.input_file,
            'output_file': self.output_file,
            'show_progress': self.show_progress,
            'fuzzy_threshold': self.fuzzy_threshold,
            'max_fuzzy_results': self.max_fuzzy_results,
            'log_level': self.log_level,
            'log_file': self.log_file
        }


@dataclass
class StageStats:
    """Counters for one compaction stage."""

    accepted: int = 0
    duplicates: int = 0
    unresolved: int = 0

    @property
    def total(self) -> int:
        return self.accepted + self.duplicates + self.unresolved


@dataclass
class CompactionStats:
    """Statistics tracking for the compaction process."""

    total_records: int = 0
    unknown_category: int = 0
    stages: Dict[str, StageStats] = field(default_factory=dict)
    processing_time: float = 0.0

    def stage(self, name: str) -> StageStats:
        """Get the counters of a stage, creating them on first use."""
        if name not in self.stages:
            self.stages[name] = StageStats()
        return self.stages[name]

    def total_accepted(self) -> int:
        return sum(s.accepted for s in self.stages.values())

    def total_skipped(self) -> int:
        """Records dropped as duplicates, orphans or unknown categories."""
        return (sum(s.duplicates + s.unresolved for s in self.stages.values())
                + self.unknown_category)

    def get_acceptance_rate(self) -> float:
        """Calculate the share of raw records that became nodes, in percent."""
        if self.total_records == 0:
            return 0.0
        return (self.total_accepted() / self.total_records) * 100
