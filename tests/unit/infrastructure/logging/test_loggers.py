"""Unit tests for logger implementations.

Tests verify that:
1. ConsoleLogger and NullLogger implement the LoggerPort protocol
2. Verbosity levels gate verbose and debug output
3. Auto-map and binding hooks keep statistics
"""

from io import StringIO
import unittest

from rich.console import Console

from sheet_merger.application.ports.services import LoggerPort
from sheet_merger.domain.entities.mapping import MappingConfiguration
from sheet_merger.domain.services.matching.resolver import (
    AutoMapResult,
    AutoMapStage,
    Binding,
)
from sheet_merger.infrastructure.logging import (
    ConsoleLogger,
    LogContext,
    LogLevel,
    NullLogger,
)


def _result(*bindings: Binding) -> AutoMapResult:
    return AutoMapResult(
        configuration=MappingConfiguration(id="mapping_1", name="Test"),
        bindings=list(bindings),
    )


BINDING = Binding(
    correspondence_id="fieldmap_1",
    target_name="Customer Name",
    field_name="customer_name",
    stage=AutoMapStage.EXACT,
)


class TestLoggerPort(unittest.TestCase):
    """Test that logger implementations comply with LoggerPort protocol."""

    def test_console_logger_implements_loggerport(self):
        self.assertIsInstance(ConsoleLogger(), LoggerPort)

    def test_null_logger_implements_loggerport(self):
        self.assertIsInstance(NullLogger(), LoggerPort)


class TestConsoleLogger(unittest.TestCase):
    """Test ConsoleLogger output and statistics."""

    def setUp(self):
        self.buffer = StringIO()
        self.console = Console(file=self.buffer, width=120)

    def _logger(self, verbosity: int = LogLevel.NORMAL) -> ConsoleLogger:
        return ConsoleLogger(console=self.console, verbosity=verbosity)

    def test_initialization(self):
        """Logger should initialize with proper defaults."""
        logger = ConsoleLogger()
        self.assertEqual(logger.verbosity, 0)
        self.assertIsNone(logger._context)
        self.assertEqual(
            logger.get_stats(),
            {"bindings": 0, "auto_map_runs": 0, "warnings": 0, "errors": 0},
        )

    def test_info_and_success(self):
        logger = self._logger()
        logger.info("plain message")
        logger.success("done")
        output = self.buffer.getvalue()
        self.assertIn("plain message", output)
        self.assertIn("✓ done", output)

    def test_verbose_hidden_at_normal_level(self):
        logger = self._logger()
        logger.verbose("details")
        logger.debug("internals")
        self.assertEqual(self.buffer.getvalue(), "")

    def test_verbose_shown_at_verbose_level(self):
        logger = self._logger(LogLevel.VERBOSE)
        logger.verbose("details")
        logger.debug("internals")
        output = self.buffer.getvalue()
        self.assertIn("details", output)
        self.assertNotIn("internals", output)

    def test_warning_and_error_counted(self):
        logger = self._logger()
        logger.warning("careful")
        logger.error("broken")
        logger.warning("again")
        stats = logger.get_stats()
        self.assertEqual(stats["warnings"], 2)
        self.assertEqual(stats["errors"], 1)
        self.assertIn("broken", self.buffer.getvalue())

    def test_context_prefix_only_at_debug(self):
        logger = self._logger(LogLevel.DEBUG)
        logger.set_context(configuration_id="mapping_1", operation="bind")
        logger.debug("checking")
        self.assertIn("[mapping_1:bind] checking", self.buffer.getvalue())

        self.buffer.truncate(0)
        self.buffer.seek(0)
        normal = self._logger()
        normal.set_context(configuration_id="mapping_1")
        normal.info("hello")
        self.assertNotIn("mapping_1", self.buffer.getvalue())

    def test_set_context_ignores_unknown_keys(self):
        logger = self._logger()
        logger.set_context(file_id="jan.xlsx", unknown="x")
        self.assertIsInstance(logger._context, LogContext)
        self.assertEqual(logger._context.file_id, "jan.xlsx")
        logger.clear_context()
        self.assertIsNone(logger._context)

    def test_auto_map_complete_updates_stats(self):
        logger = self._logger()
        logger.log_auto_map_complete("jan.xlsx", "Sheet1", _result(BINDING))
        logger.log_auto_map_complete("jan.xlsx", "Sheet1", _result())
        stats = logger.get_stats()
        self.assertEqual(stats["auto_map_runs"], 2)
        self.assertEqual(stats["bindings"], 1)
        output = self.buffer.getvalue()
        self.assertIn("Auto-mapped 1 column(s) from jan.xlsx/Sheet1", output)
        self.assertIn("No new bindings for jan.xlsx/Sheet1", output)

    def test_auto_map_stage_details_at_debug(self):
        logger = self._logger(LogLevel.DEBUG)
        logger.log_auto_map_stage("exact", [BINDING])
        output = self.buffer.getvalue()
        self.assertIn("Stage exact: 1 binding(s)", output)
        self.assertIn("customer_name → Customer Name", output)

    def test_log_binding(self):
        logger = self._logger(LogLevel.VERBOSE)
        logger.log_binding("bind", "Amount", "amt")
        logger.log_binding("unbind", "Amount", "amt")
        self.assertEqual(logger.get_stats()["bindings"], 1)
        self.assertIn("Unbound amt from Amount", self.buffer.getvalue())

    def test_reset_stats(self):
        logger = self._logger()
        logger.error("x")
        logger.reset_stats()
        self.assertEqual(logger.get_stats()["errors"], 0)


class TestLogContext(unittest.TestCase):
    """Test LogContext."""

    def test_elapsed_ms_is_non_negative(self):
        self.assertGreaterEqual(LogContext().elapsed_ms(), 0)


class TestNullLogger(unittest.TestCase):
    """NullLogger should accept every call and print nothing."""

    def test_all_methods_are_silent(self):
        logger = NullLogger()
        logger.info("x")
        logger.success("x")
        logger.warning("x")
        logger.error("x")
        logger.debug("x")
        logger.verbose("x")
        logger.log_auto_map_stage("exact", [BINDING])
        logger.log_auto_map_complete("f", "s", _result(BINDING))
        logger.log_binding("bind", "t", "f")
