"""
Main entry point for the KATOTTG geo application.

This script provides the command-line interface for compacting the raw
KATOTTG dataset and for inspecting and searching compacted snapshots.
"""

import argparse
import sys
import time
import psutil
import gc
from pathlib import Path

# Add the current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from katottg_geo.config import GeoConfig
from katottg_geo.logging_config import setup_logging
from katottg_geo.data_loader import DataLoader
from katottg_geo.geo_api import GeoAPI
from katottg_geo.hierarchy.compactor import Compactor
from katottg_geo.hierarchy.snapshot_validator import SnapshotValidator
from katottg_geo.exceptions import SnapshotError, DataLoadError, FileAccessError


def add_common_arguments(parser: argparse.ArgumentParser):
    """Add logging options shared by all commands."""
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        help="Optional path of a log file"
    )


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="KATOTTG Geo - compact and query the administrative division codifier"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compact_parser = subparsers.add_parser(
        "compact",
        help="Convert the raw KATOTTG JSON dataset into a compacted snapshot"
    )
    compact_parser.add_argument("--input", required=True, help="Path to raw KATOTTG JSON file")
    compact_parser.add_argument("--output", required=True, help="Path of the snapshot to write")
    compact_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars"
    )
    add_common_arguments(compact_parser)

    summary_parser = subparsers.add_parser(
        "summary",
        help="Print entity counts and consistency issues of a snapshot"
    )
    summary_parser.add_argument("--snapshot", required=True, help="Path to snapshot JSON file")
    add_common_arguments(summary_parser)

    search_parser = subparsers.add_parser(
        "search",
        help="Search communities or settlements by name"
    )
    search_parser.add_argument("--snapshot", required=True, help="Path to snapshot JSON file")
    search_parser.add_argument(
        "--kind",
        choices=["community", "settlement"],
        default="settlement",
        help="Entity kind to search (default: settlement)"
    )
    search_parser.add_argument("--query", required=True, help="Name or part of a name")
    search_parser.add_argument(
        "--fuzzy",
        action="store_true",
        help="Use fuzzy matching instead of substring search"
    )
    search_parser.add_argument(
        "--threshold",
        type=int,
        default=85,
        help="Fuzzy matching threshold (0-100, default: 85)"
    )
    search_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of fuzzy results (default: 10)"
    )
    add_common_arguments(search_parser)

    return parser.parse_args(argv)


class PerformanceMonitor:
    """Monitor and log performance metrics during application execution."""

    def __init__(self, logger=None):
        """Initialize performance monitor."""
        self.logger = logger
        self.process = psutil.Process()
        self.start_time = time.time()
        self.checkpoints = {}
        self.memory_snapshots = []

    def _report(self, message: str):
        if self.logger:
            self.logger.info(message)
        else:
            print(message)

    def log_memory_usage(self, checkpoint_name: str):
        """Log current memory usage."""
        memory_info = self.process.memory_info()
        memory_mb = memory_info.rss / 1024 / 1024

        snapshot = {
            'checkpoint': checkpoint_name,
            'timestamp': time.time(),
            'memory_mb': memory_mb,
            'memory_percent': self.process.memory_percent()
        }
        self.memory_snapshots.append(snapshot)

        self._report(f"Memory usage at {checkpoint_name}: {memory_mb:.1f} MB "
                     f"({snapshot['memory_percent']:.1f}%)")

    def start_checkpoint(self, name: str):
        """Start timing a checkpoint."""
        self.checkpoints[name] = {'start': time.time()}
        self.log_memory_usage(f"{name}_start")

    def end_checkpoint(self, name: str):
        """End timing a checkpoint."""
        if name in self.checkpoints:
            end_time = time.time()
            duration = end_time - self.checkpoints[name]['start']
            self.checkpoints[name]['end'] = end_time
            self.checkpoints[name]['duration'] = duration

            self.log_memory_usage(f"{name}_end")
            self._report(f"Checkpoint {name} completed in {duration:.2f} seconds")

    def get_peak_memory(self) -> float:
        """Get peak memory usage in MB."""
        if not self.memory_snapshots:
            return 0.0
        return max(snapshot['memory_mb'] for snapshot in self.memory_snapshots)

    def force_garbage_collection(self):
        """Force garbage collection and log memory impact."""
        before_memory = self.process.memory_info().rss / 1024 / 1024
        collected = gc.collect()
        after_memory = self.process.memory_info().rss / 1024 / 1024

        self._report(f"Garbage collection: freed {before_memory - after_memory:.1f} MB, "
                     f"collected {collected} objects")

    def get_performance_summary(self) -> dict:
        """Get performance summary."""
        return {
            'total_execution_time': time.time() - self.start_time,
            'peak_memory_mb': self.get_peak_memory(),
            'checkpoints': self.checkpoints.copy()
        }


def run_compact(config: GeoConfig, logger, perf_monitor: PerformanceMonitor):
    """Compact a raw dataset into a snapshot file."""
    loader = DataLoader(logger.logger)

    perf_monitor.start_checkpoint("load_raw_dataset")
    dataset = loader.load_raw_dataset(config.input_file)
    perf_monitor.end_checkpoint("load_raw_dataset")

    perf_monitor.start_checkpoint("compaction")
    logger.log_phase_start("compaction")
    compactor = Compactor(logger=logger.logger, show_progress=config.show_progress)
    snapshot = compactor.compact(dataset)
    for stage_name, stage_stats in compactor.stats.stages.items():
        logger.log_stage_statistics(stage_name, stage_stats.accepted,
                                    stage_stats.duplicates, stage_stats.unresolved)
    logger.log_phase_complete("compaction", len(snapshot), compactor.stats.processing_time)
    logger.log_compaction_complete(compactor.stats)
    perf_monitor.end_checkpoint("compaction")

    # The raw DataFrame is no longer needed once the snapshot exists
    del dataset
    perf_monitor.force_garbage_collection()

    perf_monitor.start_checkpoint("write_snapshot")
    output_path = loader.write_snapshot(snapshot, config.output_file)
    logger.log_file_operation("Snapshot written", output_path, len(snapshot))
    perf_monitor.end_checkpoint("write_snapshot")

    print(f"\nSnapshot written: {output_path}")
    print(f"  Nodes: {len(snapshot):,}")
    print(f"  Skipped records: {compactor.stats.total_skipped():,}")


def run_summary(config: GeoConfig, logger, perf_monitor: PerformanceMonitor) -> bool:
    """Print entity counts and consistency issues. Returns True when consistent."""
    perf_monitor.start_checkpoint("build_hierarchy")
    snapshot = DataLoader(logger.logger).load_snapshot(config.input_file)
    api = GeoAPI.from_snapshot(snapshot, logger=logger.logger)
    perf_monitor.end_checkpoint("build_hierarchy")

    is_consistent, issues = SnapshotValidator(logger.logger).check_consistency(snapshot)

    summary = api.get_summary()
    print("\n" + "=" * 60)
    print("KATOTTG SNAPSHOT SUMMARY")
    print("=" * 60)
    print(f"  Order date: {summary['order_date']}")
    print(f"  Regions: {summary['regions']:,}")
    print(f"  Region districts: {summary['region_districts']:,}")
    print(f"  City districts: {summary['city_districts']:,}")
    print(f"  Communities: {summary['communities']:,}")
    print(f"  Settlements: {summary['settlements']:,}")

    if is_consistent:
        print("\nHierarchy is consistent")
    else:
        print(f"\nConsistency issues ({len(issues)}):")
        for issue in issues[:20]:
            print(f"  - {issue}")
        if len(issues) > 20:
            print(f"  ... and {len(issues) - 20} more")

    return is_consistent


def run_search(args, config: GeoConfig, logger):
    """Search communities or settlements by name and print the matches."""
    api = GeoAPI.from_file(config.input_file, logger=logger.logger)

    if args.fuzzy:
        search = (api.fuzzy_search_communities if args.kind == "community"
                  else api.fuzzy_search_settlements)
        matches = search(args.query, threshold=config.fuzzy_threshold,
                         limit=config.max_fuzzy_results)
        for entity, score in matches:
            print(f"{entity.id}\t{entity.name_full}\t{score:.1f}")
        print(f"\n{len(matches)} match(es)")
        return

    search = api.search_communities if args.kind == "community" else api.search_settlements
    matches = search(args.query)
    for entity in matches:
        print(f"{entity.id}\t{entity.name_full}")
    print(f"\n{len(matches)} match(es)")


def main(argv=None):
    """Main application entry point."""
    args = parse_arguments(argv)

    try:
        if args.command == "compact":
            config = GeoConfig(
                input_file=args.input,
                output_file=args.output,
                show_progress=not args.no_progress,
                log_level=args.log_level,
                log_file=args.log_file
            )
        elif args.command == "summary":
            config = GeoConfig(
                input_file=args.snapshot,
                log_level=args.log_level,
                log_file=args.log_file
            )
        else:
            config = GeoConfig(
                input_file=args.snapshot,
                fuzzy_threshold=args.threshold,
                max_fuzzy_results=args.limit,
                log_level=args.log_level,
                log_file=args.log_file
            )

        logger = setup_logging(config)
        logger.info(f"Configuration: {config.to_dict()}")

        perf_monitor = PerformanceMonitor(logger.logger)

        if args.command == "compact":
            run_compact(config, logger, perf_monitor)
        elif args.command == "summary":
            if not run_summary(config, logger, perf_monitor):
                perf_summary = perf_monitor.get_performance_summary()
                logger.info(f"Total execution time: {perf_summary['total_execution_time']:.2f}s")
                return 5
        else:
            run_search(args, config, logger)

        perf_summary = perf_monitor.get_performance_summary()
        logger.info(f"Total execution time: {perf_summary['total_execution_time']:.2f}s, "
                    f"peak memory: {perf_summary['peak_memory_mb']:.1f} MB")
        return 0

    except SnapshotError as e:
        print(f"\nSnapshot Error: {e}", file=sys.stderr)
        for issue in e.issues[:10]:
            print(f"  - {issue}", file=sys.stderr)
        return 2

    except (DataLoadError, FileAccessError) as e:
        print(f"\nData Load Error: {e}", file=sys.stderr)
        return 3

    except FileNotFoundError as e:
        print(f"\nFile Error: {e}", file=sys.stderr)
        print("Please check that all input files exist and are accessible.", file=sys.stderr)
        return 4

    except KeyboardInterrupt:
        print("\nProcess interrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"\nError: Unexpected error: {e}", file=sys.stderr)
        print("Please check the log files for more details.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
