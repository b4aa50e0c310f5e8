"""
Tests for the logging contract.

No kwargs to logger calls; only extra={"context": {...}} allowed.
"""

import ast
import json
import logging
import tempfile
import unittest
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List

from core.logging import (
    ConsoleFormatter,
    JSONFormatter,
    clear_global_context,
    get_logger,
    set_global_context,
    setup_logging,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent
SOURCE_PACKAGES = ["core", "execution", "replay", "config"]


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        violations = []
        tree = ast.parse(source_code)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue
            if node.func.attr not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()
            else:
                is_logger = False
            if not is_logger:
                continue

            for kw in node.keywords:
                if kw.arg and kw.arg not in self.ALLOWED_KWARGS:
                    violations.append({
                        "line": node.lineno,
                        "method": node.func.attr,
                        "invalid_kwarg": kw.arg,
                    })

        return violations

    def test_source_has_no_invalid_kwargs(self):
        files = [PROJECT_ROOT / "run_controller.py"]
        for package in SOURCE_PACKAGES:
            files.extend(sorted((PROJECT_ROOT / package).rglob("*.py")))

        for filepath in files:
            with self.subTest(file=str(filepath.relative_to(PROJECT_ROOT))):
                violations = self._find_logger_violations(filepath.read_text(encoding="utf-8"))
                self.assertEqual(violations, [])

    def test_detector_catches_violation(self):
        violations = self._find_logger_violations('logger.info("x", run_id="r")')
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0]["invalid_kwarg"], "run_id")


class TestStructuredOutput(unittest.TestCase):

    def setUp(self):
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(JSONFormatter())
        self.base = logging.getLogger("runguard.test_output")
        self.base.addHandler(self.handler)
        self.base.setLevel(logging.DEBUG)
        self.base.propagate = False

    def tearDown(self):
        self.base.removeHandler(self.handler)
        clear_global_context()

    def test_json_entry_has_merged_context(self):
        set_global_context(service="runguard")
        logger = get_logger("runguard.test_output", component="loop")
        logger.info("Step recorded", extra={"context": {"step_number": 3}})

        entry = json.loads(self.stream.getvalue().strip())
        self.assertEqual(entry["level"], "INFO")
        self.assertEqual(entry["logger"], "runguard.test_output")
        self.assertEqual(entry["message"], "Step recorded")
        self.assertEqual(entry["context"], {"service": "runguard", "component": "loop", "step_number": 3})

    def test_run_id_is_lifted_to_top_level(self):
        logger = get_logger("runguard.test_output")
        logger.warning("Run terminated", extra={"context": {"run_id": "run_7", "state": "FAILED"}})

        entry = json.loads(self.stream.getvalue().strip())
        self.assertEqual(entry["run_id"], "run_7")
        self.assertEqual(entry["context"], {"state": "FAILED"})

    def test_console_formatter_summarizes_context(self):
        record = logging.LogRecord("runguard.x", logging.WARNING, __file__, 1, "Run terminated", None, None)
        record.context = {"a": 1, "b": 2, "c": 3, "d": 4, "e": 5}
        line = ConsoleFormatter().format(record)
        self.assertIn("| WARNING  | runguard.x | Run terminated | a=1, b=2, c=3, d=4", line)
        self.assertIn("(+1 more)", line)


def _drop_root_handlers():
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)


class TestSetupLogging(unittest.TestCase):

    def tearDown(self):
        _drop_root_handlers()

    def test_log_file_receives_json_lines(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "logs" / "run.log"
            setup_logging(level="info", json_output=False, log_file=str(log_path))

            get_logger("runguard.test_file").info("Run started", extra={"context": {"run_id": "run_f"}})
            get_logger("runguard.test_file").debug("below level")
            _drop_root_handlers()

            lines = log_path.read_text(encoding="utf-8").splitlines()
            self.assertEqual(len(lines), 1)
            entry = json.loads(lines[0])
            self.assertEqual(entry["message"], "Run started")
            self.assertEqual(entry["run_id"], "run_f")

    def test_unknown_level_rejected(self):
        with self.assertRaises(ValueError):
            setup_logging(level="VERBOSE")


if __name__ == "__main__":
    unittest.main()
