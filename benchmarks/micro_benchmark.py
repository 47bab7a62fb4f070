#!/usr/bin/env python3
"""
Micro-benchmark: store, fetch and cursor scan throughput.

Usage:
    python benchmarks/micro_benchmark.py            # configured engine
    python benchmarks/micro_benchmark.py memory     # pure-Python engine
"""

import os
import sys
import time
import statistics
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from unqlitekv import Handle, OpenMode, create_engine

# Config
N_RECORDS = 20000
VALUE = b"x" * 64

engine_name = sys.argv[1] if len(sys.argv) > 1 else None
engine = create_engine(engine_name)

print("=" * 70)
print(f"UNQLITEKV MICRO-BENCHMARKS (engine={engine.name}, n={N_RECORDS})")
print("=" * 70)

workdir = tempfile.mkdtemp(prefix="unqlitekv-bench-")
db_path = os.path.join(workdir, "bench.db")


def timed(label, fn):
    start = time.perf_counter_ns()
    fn()
    elapsed = time.perf_counter_ns() - start
    per_op = elapsed / N_RECORDS
    print(f"   {label:<32} {elapsed / 1e6:9.1f}ms ({per_op:7.0f}ns/op)")
    return per_op


db = Handle(engine)
if not db.open(db_path, OpenMode.CREATE):
    sys.exit(f"open failed: {db.last_result_code}")

# ============================================================================
# Test 1: Stores under the implicit transaction
# ============================================================================
print("\n1. STORE (implicit transaction)")
timed("store", lambda: [db.store(f"k{i:08d}", VALUE) for i in range(N_RECORDS)])
db.commit()

# ============================================================================
# Test 2: Stores batched in explicit transactions
# ============================================================================
print("\n2. STORE (explicit begin/commit every 1000)")


def batched():
    for i in range(N_RECORDS):
        if i % 1000 == 0:
            db.begin()
        db.store(f"b{i:08d}", VALUE)
        if i % 1000 == 999:
            db.commit()
    db.commit()


timed("store batched", batched)

# ============================================================================
# Test 3: Point reads
# ============================================================================
print("\n3. FETCH")
timed("fetch hit", lambda: [db.fetch(f"k{i:08d}") for i in range(N_RECORDS)])
timed("fetch miss", lambda: [db.fetch(f"missing{i}") for i in range(N_RECORDS)])

# ============================================================================
# Test 4: Cursor scan
# ============================================================================
print("\n4. CURSOR SCAN")
with db.cursor() as cur:
    samples = []
    for _ in range(3):
        start = time.perf_counter_ns()
        count = sum(1 for _ in cur)
        samples.append((time.perf_counter_ns() - start) / max(count, 1))
    print(f"   full scan ({count} records)         p50: {statistics.median(samples):7.0f}ns/record")

db.close()
print("\n✓ Done")
