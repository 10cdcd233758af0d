"""
Data loading module.

This module provides the DataLoader class for reading the raw KATOTTG JSON
dataset and compacted snapshots, and for writing snapshots back to disk.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import (
    DataLoadError,
    FileAccessError,
    SnapshotError,
    create_file_error
)
from .models import RawDataset, Snapshot
from .utils.data_utils import get_data_quality_summary
from .utils.error_handler import create_error_context, log_error_details


class DataLoader:
    """
    Handles reading and writing of KATOTTG documents.

    Raw datasets are converted into a pandas DataFrame of records; snapshots
    are parsed into Snapshot objects, with structural problems reported as
    SnapshotError.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the DataLoader.

        Args:
            logger: Optional logger instance for logging operations
        """
        self.logger = logger or logging.getLogger(__name__)

    def load_raw_dataset(self, file_path: Union[str, Path]) -> RawDataset:
        """
        Load the raw KATOTTG dataset from a JSON file.

        Args:
            file_path: Path to the raw JSON document

        Returns:
            RawDataset with records as a DataFrame

        Raises:
            FileAccessError: If the file cannot be accessed
            DataLoadError: If the document cannot be parsed or lacks fields
        """
        file_path = str(file_path)
        self.logger.info(f"Loading raw dataset from: {file_path}")

        data = self._read_json(file_path, "raw dataset")
        dataset = RawDataset.from_dict(data, file_path=file_path)

        self.logger.info(f"Loaded {len(dataset):,} raw records (order date: {dataset.order_date})")

        quality_summary = get_data_quality_summary(dataset.records)
        self.logger.info(f"Raw data quality: {quality_summary}")

        return dataset

    def load_snapshot(self, file_path: Union[str, Path]) -> Snapshot:
        """
        Load a compacted snapshot from a JSON file.

        Args:
            file_path: Path to the snapshot document

        Returns:
            Snapshot object

        Raises:
            FileAccessError: If the file cannot be accessed
            DataLoadError: If the file is not valid JSON
            SnapshotError: If the document is not a well-formed snapshot
        """
        file_path = str(file_path)
        self.logger.info(f"Loading snapshot from: {file_path}")

        data = self._read_json(file_path, "snapshot")

        try:
            snapshot = Snapshot.from_dict(data)
        except SnapshotError as e:
            log_error_details(self.logger, e, create_error_context(
                operation="load_snapshot",
                file_path=file_path
            ))
            raise

        self.logger.info(f"Loaded snapshot with {len(snapshot):,} nodes (order date: {snapshot.order_date})")
        return snapshot

    def write_snapshot(self, snapshot: Snapshot, file_path: Union[str, Path]) -> str:
        """
        Write a snapshot as compact UTF-8 JSON.

        Args:
            snapshot: Snapshot to write
            file_path: Destination path, parent directories are created

        Returns:
            Path of the written file

        Raises:
            FileAccessError: If the file cannot be written
        """
        path = Path(file_path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(snapshot.to_json(), encoding='utf-8')
        except OSError as e:
            raise create_file_error("write", str(path), e)

        self.logger.debug(f"Wrote snapshot: {path} ({len(snapshot):,} records)")
        return str(path)

    def _read_json(self, file_path: str, description: str) -> Any:
        """
        Read and parse a JSON file.

        Raises:
            FileAccessError: If the path is missing, not a file or unreadable
            DataLoadError: If the content is not valid JSON
        """
        path = Path(file_path)
        if not path.exists():
            raise FileAccessError(
                f"{description.capitalize()} file not found: {file_path}",
                file_path=file_path,
                operation="read"
            )

        if not path.is_file():
            raise FileAccessError(
                f"Path is not a file: {file_path}",
                file_path=file_path,
                operation="read"
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise DataLoadError(
                f"Error parsing {description} JSON at line {e.lineno}: {e.msg}",
                file_path=file_path,
                original_error=e
            )
        except UnicodeDecodeError as e:
            raise DataLoadError(
                f"{description.capitalize()} file is not valid UTF-8",
                file_path=file_path,
                original_error=e
            )
        except PermissionError as e:
            raise FileAccessError(
                f"Permission denied accessing {description} file: {file_path}",
                file_path=file_path,
                operation="read",
                original_error=e
            )
        except OSError as e:
            context = create_error_context(
                operation=f"read {description}",
                file_path=file_path,
                error_type=type(e).__name__
            )
            log_error_details(self.logger, e, context)
            raise create_file_error("read", file_path, e)
