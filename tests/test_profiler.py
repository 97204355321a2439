"""Tests for the performance profiler."""

import pytest

from bsonverter.profiler import PerformanceProfiler


class TestPerformanceProfiler:
    """Tests for PerformanceProfiler class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.profiler = PerformanceProfiler()

    def test_profile_operation_records_metrics(self):
        with self.profiler.profile_operation("convert_all", input_size=2048) as profiler:
            profiler.sample_performance()
            metrics = profiler.stop_profiling(
                output_size=4096,
                buffers_converted=2,
                buffers_failed=1,
                documents_converted=5,
            )

        assert metrics.operation_name == "convert_all"
        assert metrics.input_size == 2048
        assert metrics.expansion_ratio == 2.0
        assert metrics.buffers_converted == 2
        assert metrics.buffers_failed == 1
        assert metrics.documents_converted == 5
        assert metrics.memory_peak_mb >= metrics.memory_start_mb
        assert self.profiler.metrics_history == [metrics]
        assert self.profiler.current_operation is None

    def test_context_manager_stops_unfinished_session(self):
        with self.profiler.profile_operation("convert_all"):
            pass

        assert len(self.profiler.metrics_history) == 1
        assert self.profiler.current_operation is None

    def test_stop_without_start(self):
        with pytest.raises(ValueError, match="No active profiling session"):
            self.profiler.stop_profiling()

    def test_summary(self):
        assert self.profiler.get_performance_summary() == {"total_operations": 0}

        self.profiler.start_profiling("first", input_size=100)
        self.profiler.stop_profiling(output_size=300, buffers_converted=1, documents_converted=3)
        self.profiler.start_profiling("second", input_size=100)
        self.profiler.stop_profiling(output_size=100, buffers_failed=1)

        summary = self.profiler.get_performance_summary()

        assert summary["total_operations"] == 2
        assert summary["total_buffers_converted"] == 1
        assert summary["total_buffers_failed"] == 1
        assert summary["total_documents_converted"] == 3
        assert summary["overall_expansion_ratio"] == 2.0
