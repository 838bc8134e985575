#!/usr/bin/env python3
"""
Performance Benchmark for hashflake

Tests throughput and uniqueness of flake generation against the targets
from README.md:

- Generation: >100,000 flakes/sec from a single thread
- Concurrency: no duplicates from 8 threads sharing one generator
- Interval capacity: >4,000,000 raw flakes inside one frozen interval,
  strictly increasing through the counter carry
- Decoding: >100,000 decodes/sec

Run:
    python scripts/performance_benchmark.py
"""

import threading
import time

from hashflake import Flaker, GeneratorSettings, decode
from hashflake.kernel.layout import DEFAULT_EPOCH_START_NS, TICK_NANOS
from hashflake.kernel.time import TestTimeProvider


def benchmark_single_thread() -> dict:
    """Benchmark shuffled and raw generation from one thread"""
    print("\n=== Benchmark: Single-Thread Generation ===")

    flaker = Flaker(GeneratorSettings(node_id=1))
    num_flakes = 1_000_000
    rates = {}

    for name, generate in (("next", flaker.next), ("next_raw", flaker.next_raw)):
        start_time = time.perf_counter()
        for _ in range(num_flakes):
            generate()
        elapsed = time.perf_counter() - start_time
        rates[name] = num_flakes / elapsed if elapsed > 0 else 0
        print(f"  {name:9s} {rates[name]:,.0f} flakes/sec")

    slowest = min(rates.values())
    print(f"  Status: {'✓ PASS' if slowest > 100_000 else '✗ FAIL'}")

    return {
        "test": "single_thread",
        "flakes": num_flakes,
        "flakes_per_sec": slowest,
        "pass": slowest > 100_000,
    }


def benchmark_concurrent_generation() -> dict:
    """Benchmark 8 threads sharing one generator"""
    print("\n=== Benchmark: Concurrent Generation ===")

    flaker = Flaker(GeneratorSettings(node_id=2))
    num_threads = 8
    per_thread = 100_000
    results: list[list[int]] = [[] for _ in range(num_threads)]

    def worker(index: int) -> None:
        results[index] = [flaker.next() for _ in range(per_thread)]

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(num_threads)]
    start_time = time.perf_counter()
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    elapsed = time.perf_counter() - start_time

    total = num_threads * per_thread
    duplicates = total - len({flake for batch in results for flake in batch})

    print(f"  Threads: {num_threads}")
    print(f"  Flakes: {total:,}")
    print(f"  Flakes/sec: {total / elapsed:,.0f}")
    print(f"  Duplicates: {duplicates}")
    print(f"  Status: {'✓ PASS' if duplicates == 0 else '✗ FAIL'}")

    return {
        "test": "concurrent_generation",
        "flakes": total,
        "elapsed_sec": elapsed,
        "pass": duplicates == 0,
    }


def benchmark_interval_capacity() -> dict:
    """Fill one frozen interval past the point where the counter carries"""
    print("\n=== Benchmark: Interval Capacity ===")

    clock = TestTimeProvider(DEFAULT_EPOCH_START_NS + 1000 * TICK_NANOS)
    flaker = Flaker(GeneratorSettings(node_id=3), clock)
    num_flakes = 4_300_000

    start_time = time.perf_counter()
    previous = -1
    ordered = True
    for _ in range(num_flakes):
        flake = flaker.next_raw()
        if flake <= previous:
            ordered = False
            break
        previous = flake
    elapsed = time.perf_counter() - start_time

    print(f"  Flakes in one interval: {num_flakes:,}")
    print(f"  Time elapsed: {elapsed:.2f}s")
    print(f"  Strictly increasing: {ordered}")
    print(f"  Status: {'✓ PASS' if ordered else '✗ FAIL'}")

    return {
        "test": "interval_capacity",
        "flakes": num_flakes,
        "elapsed_sec": elapsed,
        "pass": ordered,
    }


def benchmark_decode() -> dict:
    """Benchmark decoding of all three text forms"""
    print("\n=== Benchmark: Decoding ===")

    flaker = Flaker(GeneratorSettings(node_id=4))
    flakes = [flaker.next() for _ in range(100_000)]
    texts = [f.to_hex() for f in flakes] + [f.to_base32() for f in flakes] + [f.to_base64() for f in flakes]

    start_time = time.perf_counter()
    decoded = [decode(text) for text in texts]
    elapsed = time.perf_counter() - start_time

    decodes_per_sec = len(texts) / elapsed if elapsed > 0 else 0
    matches = decoded == flakes * 3

    print(f"  Decodes: {len(texts):,}")
    print(f"  Decodes/sec: {decodes_per_sec:,.0f}")
    print(f"  Round trips match: {matches}")
    print(f"  Status: {'✓ PASS' if matches and decodes_per_sec > 100_000 else '✗ FAIL'}")

    return {
        "test": "decode",
        "decodes": len(texts),
        "decodes_per_sec": decodes_per_sec,
        "pass": matches and decodes_per_sec > 100_000,
    }


def main() -> None:
    """Run all benchmarks"""
    print("\n" + "=" * 70)
    print("  hashflake - Performance Benchmark Suite")
    print("=" * 70)

    results = [
        benchmark_single_thread(),
        benchmark_concurrent_generation(),
        benchmark_interval_capacity(),
        benchmark_decode(),
    ]

    print("\n" + "=" * 70)
    print("  Summary")
    print("=" * 70)

    passed = sum(1 for r in results if r["pass"])
    for result in results:
        status = "✓ PASS" if result["pass"] else "✗ FAIL"
        print(f"  {result['test']:30s} {status}")

    print(f"\n  Tests passed: {passed}/{len(results)}")
    if passed < len(results):
        print("\n  ⚠️ Some performance targets not met (see details above)")

    print("\n" + "=" * 70 + "\n")


if __name__ == "__main__":
    main()
