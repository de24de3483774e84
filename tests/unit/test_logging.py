"""
Unit tests for logging setup and pipeline statistics.
"""

import logging

from ruuvi_collector.utils.logging import COMPONENT_LOGGERS, PerformanceMonitor, ProductionLogger


class TestPerformanceMonitor:
    """Test suite for PerformanceMonitor."""

    def test_counters(self, mock_logger):
        monitor = PerformanceMonitor(logger=mock_logger)
        monitor.increment('lines_read')
        monitor.increment('lines_read', 2)

        assert monitor.count('lines_read') == 3
        assert monitor.count('never') == 0

    def test_measure_time(self, mock_logger):
        monitor = PerformanceMonitor(logger=mock_logger)

        with monitor.measure_time('decode'):
            pass
        with monitor.measure_time('decode'):
            pass

        summary = monitor.get_performance_summary()
        assert summary['timings']['decode'] >= 0.0
        assert mock_logger.debug.call_count == 2

    def test_log_summary(self, mock_logger):
        monitor = PerformanceMonitor(logger=mock_logger)
        monitor.increment('readings_accepted', 4)

        monitor.log_summary()

        message = mock_logger.info.call_args[0][0]
        assert "readings_accepted=4" in message


class TestProductionLogger:
    """Test suite for ProductionLogger."""

    def test_file_logging(self, tmp_path):
        """Test that file logging writes to a rotating log file."""
        root_logger = logging.getLogger()
        saved_handlers = list(root_logger.handlers)
        saved_level = root_logger.level
        try:
            production_logger = ProductionLogger(
                log_dir=str(tmp_path / "logs"),
                log_level="DEBUG",
                enable_console=False,
                enable_file=True
            )
            production_logger.get_logger('ruuvi.hci').info("hello from the parser")
            for handler in root_logger.handlers:
                handler.flush()

            log_file = tmp_path / "logs" / "ruuvi_collector.log"
            assert log_file.exists()
            assert "hello from the parser" in log_file.read_text()
            for name in COMPONENT_LOGGERS:
                assert logging.getLogger(name).level == logging.DEBUG
        finally:
            for handler in root_logger.handlers:
                handler.close()
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)
