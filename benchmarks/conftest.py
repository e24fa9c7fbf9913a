"""Benchmark fixtures and configuration."""

from __future__ import annotations

import pytest


@pytest.fixture
def large_script() -> str:
    """Generate a large SQL script (~200KB)."""
    statements = []
    for i in range(1000):
        statements.append(f"""
/* statement {i} */
select /*+ index(t idx_{i}) */ t.id, t.name, 'row ''{i}''' as label, 0x{i:X}, {i}.5e3
  from schema_{i % 7}.table_{i} t
 where t.flag is not null and t.id between {i}..{i + 10} -- range
   and t.note = q'[free text {i}]';
""")
    return "".join(statements)


@pytest.fixture
def identifier_heavy() -> str:
    """Long runs of identifiers and operators with little trivia."""
    return " ".join(f"col_{i}+col_{i + 1}*2" for i in range(20000))
