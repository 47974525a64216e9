"""
Benchmark suite for jsonloc parsing performance.

Compares jsonloc against standard JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures parsing speed and memory usage across different data types.
"""
