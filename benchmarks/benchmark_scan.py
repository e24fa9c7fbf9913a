"""Benchmark scanning throughput.

Compares in-memory scanning with chunked streaming and small buffers.

Run with:
    pytest benchmarks/benchmark_scan.py -v --benchmark-only
"""

try:
    import io

    import pytest

    from dmlex import IterableSource, Lexer, ScanConfig

    def drain(lexer: Lexer) -> int:
        return sum(1 for _ in lexer)

    @pytest.mark.benchmark(group="scan")
    def test_benchmark_scan_string(benchmark, large_script):
        """Scan a whole script held in memory."""
        count = benchmark(lambda: drain(Lexer(large_script)))
        assert count > 0

    @pytest.mark.benchmark(group="scan")
    def test_benchmark_scan_stream(benchmark, large_script):
        """Scan the same script through a text stream."""
        benchmark(lambda: drain(Lexer(io.StringIO(large_script))))

    @pytest.mark.benchmark(group="scan")
    def test_benchmark_scan_small_chunks(benchmark, large_script):
        """Scan a source that delivers 16 characters per read."""
        chunks = [large_script[i : i + 16] for i in range(0, len(large_script), 16)]
        benchmark(lambda: drain(Lexer(IterableSource(chunks))))

    @pytest.mark.benchmark(group="scan-buffer")
    @pytest.mark.parametrize("buffer_size", [64, 4096, 65536])
    def test_benchmark_buffer_size(benchmark, identifier_heavy, buffer_size):
        """Effect of the initial buffer size on an identifier-heavy input."""
        config = ScanConfig(buffer_size=buffer_size)
        benchmark(lambda: drain(Lexer(identifier_heavy, config=config)))

except ImportError:
    pass  # pytest not available
