"""Tests for ContextVar-based scan configuration.

Validates thread isolation, context manager behavior, and that a Lexer
reads its config exactly once.
"""

import logging
from threading import Thread

import pytest

from dmlex import (
    Lexer,
    ScanConfig,
    get_scan_config,
    reset_scan_config,
    scan_config_context,
    set_scan_config,
    tokenize,
)
from dmlex.config import DEFAULT_BUFFER_SIZE


class TestScanConfigDataclass:
    """Test ScanConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        config = ScanConfig()
        assert config.buffer_size == DEFAULT_BUFFER_SIZE == 16384
        assert config.debug is False

    def test_immutability(self) -> None:
        config = ScanConfig()
        with pytest.raises(AttributeError):
            config.debug = True  # type: ignore[misc]

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_empty_buffer(self, size: int) -> None:
        with pytest.raises(ValueError, match="buffer_size"):
            ScanConfig(buffer_size=size)


class TestScanConfigFromDict:
    """Test ScanConfig.from_dict() factory method."""

    def test_from_dict_basic(self) -> None:
        config = ScanConfig.from_dict({"buffer_size": 64, "debug": True})
        assert config.buffer_size == 64
        assert config.debug is True

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = ScanConfig.from_dict({"debug": True, "dsn": "dm://localhost", "pool": 4})
        assert config.debug is True
        assert config.buffer_size == DEFAULT_BUFFER_SIZE

    def test_from_dict_empty(self) -> None:
        assert ScanConfig.from_dict({}) == ScanConfig()


class TestContextVarFunctions:
    """Test get/set/reset functions."""

    def teardown_method(self) -> None:
        reset_scan_config()

    def test_default_config(self) -> None:
        assert get_scan_config() == ScanConfig()

    def test_set_and_get(self) -> None:
        set_scan_config(ScanConfig(buffer_size=8))
        assert get_scan_config().buffer_size == 8

    def test_reset_restores_default(self) -> None:
        set_scan_config(ScanConfig(debug=True))
        reset_scan_config()
        assert get_scan_config().debug is False


class TestScanConfigContext:
    """Test scan_config_context context manager."""

    def test_context_sets_config(self) -> None:
        with scan_config_context(ScanConfig(debug=True)):
            assert get_scan_config().debug is True
        assert get_scan_config().debug is False

    def test_nested_contexts(self) -> None:
        with scan_config_context(ScanConfig(buffer_size=32)):
            with scan_config_context(ScanConfig(buffer_size=4)):
                assert get_scan_config().buffer_size == 4
            assert get_scan_config().buffer_size == 32
        assert get_scan_config().buffer_size == DEFAULT_BUFFER_SIZE

    def test_context_restores_on_exception(self) -> None:
        with pytest.raises(ValueError, match="test"):
            with scan_config_context(ScanConfig(debug=True)):
                raise ValueError("test")
        assert get_scan_config().debug is False


class TestLexerReadsConfig:
    """The Lexer takes its settings from the context once, at construction."""

    def teardown_method(self) -> None:
        reset_scan_config()

    def test_lexer_uses_context_config(self) -> None:
        with scan_config_context(ScanConfig(buffer_size=7)):
            lexer = Lexer("select 1")
        assert lexer._buffer.capacity == 7

    def test_config_read_only_at_construction(self) -> None:
        lexer = Lexer("select 1")
        set_scan_config(ScanConfig(buffer_size=3, debug=True))
        assert lexer._buffer.capacity == DEFAULT_BUFFER_SIZE
        assert lexer._debug is False

    def test_explicit_config_wins(self) -> None:
        with scan_config_context(ScanConfig(buffer_size=7)):
            lexer = Lexer("select 1", config=ScanConfig(buffer_size=5))
        assert lexer._buffer.capacity == 5

    def test_thread_isolation(self) -> None:
        results: dict[int, int] = {}

        def worker(thread_id: int, size: int) -> None:
            set_scan_config(ScanConfig(buffer_size=size))
            results[thread_id] = Lexer("x")._buffer.capacity

        threads = [Thread(target=worker, args=(i, 2**i)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {0: 1, 1: 2, 2: 4, 3: 8}


class TestDebugLogging:
    """debug=True logs every matched rule."""

    def test_debug_logs_rule_names(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="dmlex"):
            list(tokenize("x := 1", config=ScanConfig(debug=True)))
        messages = [r.getMessage() for r in caplog.records if r.name == "dmlex.lexer.core"]
        assert any("{identifier} matched 'x'" in m for m in messages)
        assert any("{assign} matched ':='" in m for m in messages)
        assert any("{integer} matched '1'" in m for m in messages)

    def test_no_rule_logging_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="dmlex"):
            list(tokenize("x := 1"))
        assert not [r for r in caplog.records if "matched" in r.getMessage()]
