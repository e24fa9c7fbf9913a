"""Stream tokens from a file without reading it into memory.

Usage:
    python examples/streaming/scan_file.py script.sql
"""

import sys
from collections import Counter

from dmlex import Lexer, ScanConfig, ScanError

path = sys.argv[1]
counts: Counter[str] = Counter()

with open(path, encoding="utf-8", newline="") as stream:
    lexer = Lexer(stream, source_file=path, config=ScanConfig(buffer_size=4096))
    try:
        for token in lexer:
            counts[token.kind.name] += 1
    except ScanError as e:
        print(f"{path}: {e}", file=sys.stderr)
        sys.exit(1)

for kind, count in counts.most_common():
    print(f"{kind:24} {count}")
