# ========================
# ev_insights/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Tracks elapsed time, throughput and memory for pipeline stages.
"""

import os
import time
import logging
from contextlib import contextmanager
from typing import Dict, Any, Optional

import psutil

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """
    Performance monitoring utility for the pipeline.
    Tracks memory usage, processing time, and throughput.
    """

    def __init__(self, name: str = "Pipeline"):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.records_processed = 0
        self.checkpoints = []
        self.summary: Optional[Dict[str, Any]] = None

        logger.debug(f"PerformanceMonitor initialized: {name}")

    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        self.start_time = time.perf_counter()
        self.peak_memory_mb = self._get_memory_usage_mb()

        logger.info(f"{self.name} - Performance monitoring started")
        logger.debug(f"Initial memory usage: {self.peak_memory_mb:.2f} MB")

    def update_progress(self, records: int) -> None:
        """
        Add processed records and refresh the memory peak.

        Args:
            records (int): Number of records handled since the last update
        """
        self.records_processed += records
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

    def add_checkpoint(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Add a performance checkpoint.

        Args:
            name (str): Checkpoint name
            metadata (dict): Optional metadata to store
        """
        elapsed = time.perf_counter() - self.start_time if self.start_time else 0
        checkpoint = {
            'name': name,
            'elapsed_seconds': elapsed,
            'memory_mb': self._get_memory_usage_mb(),
            'records_processed': self.records_processed,
            'metadata': metadata or {}
        }
        self.checkpoints.append(checkpoint)
        logger.debug(f"Checkpoint '{name}': {checkpoint}")

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.perf_counter()
        total_time = self.end_time - self.start_time if self.start_time else 0
        throughput = self.records_processed / total_time if total_time > 0 else 0

        summary = {
            'name': self.name,
            'total_processing_time_seconds': total_time,
            'records_processed': self.records_processed,
            'average_throughput_records_per_second': throughput,
            'peak_memory_usage_mb': self.peak_memory_mb,
            'checkpoints': self.checkpoints
        }

        self.summary = summary
        self._log_summary(summary)
        return summary

    def _log_summary(self, summary: Dict[str, Any]) -> None:
        """Log formatted performance summary."""
        logger.info(
            f"{summary['name']} - {summary['records_processed']:,} records in "
            f"{summary['total_processing_time_seconds']:.2f}s "
            f"({summary['average_throughput_records_per_second']:.0f} records/sec, "
            f"peak memory {summary['peak_memory_usage_mb']:.2f} MB)"
        )
        for checkpoint in summary['checkpoints']:
            logger.info(f"  {checkpoint['name']}: {checkpoint['elapsed_seconds']:.3f}s")

    def _get_memory_usage_mb(self) -> float:
        """Get current resident memory in MB."""
        try:
            memory_bytes = psutil.Process(os.getpid()).memory_info().rss
        except psutil.Error as e:
            logger.debug(f"Could not get memory usage: {e}")
            return 0.0
        return memory_bytes / (1024 * 1024)


@contextmanager
def monitor_performance(name: str = "Pipeline"):
    """
    Context manager for easy performance monitoring.

    Args:
        name (str): Name for this monitoring session

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
