"""
Tests for logging setup and text helpers.
"""

import json
import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Keep handler changes local to each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test logging configuration."""
    
    def test_console_handler_is_rich(self):
        from rich.logging import RichHandler
        from page_lens.utils import setup_logging
        
        setup_logging(level="WARNING")
        
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
    
    def test_json_log_file(self, tmp_path):
        """Test JSON lines in the log file."""
        from page_lens.utils import setup_logging
        
        log_file = tmp_path / "page-lens.log"
        setup_logging(level="INFO", log_file=str(log_file), json_format=True)
        
        logging.getLogger("page_lens.test").info("Built document")
        for handler in logging.getLogger().handlers:
            handler.flush()
        
        record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record["message"] == "Built document"
        assert record["level"] == "INFO"
        assert record["name"] == "page_lens.test"
    
    def test_verbose_forces_debug(self):
        from page_lens.config import LoggingSettings
        from page_lens.utils import setup_logging_from_settings
        
        setup_logging_from_settings(LoggingSettings(level="ERROR"), verbose=True)
        
        assert logging.getLogger().level == logging.DEBUG


class TestTextHelpers:
    """Test whitespace and word helpers."""
    
    def test_normalize_whitespace(self):
        from page_lens.utils import normalize_whitespace
        
        assert normalize_whitespace("  Hello \n\t world  ") == "Hello world"
        assert normalize_whitespace("") == ""
    
    def test_count_words(self):
        from page_lens.utils import count_words
        
        assert count_words("This is a test with some words here") == 8
        assert count_words("   ") == 0
    
    def test_contains_any(self):
        from page_lens.utils import contains_any
        
        assert contains_any("Getting Started Guide", ["getting started"])
        assert not contains_any("Blog", ["pricing", "faq"])
