"""Benchmark batch point transformation."""

import logging
import math
import time

import numpy as np

from cframe import Transform, Vector3

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def create_test_points(n: int) -> np.ndarray:
    """Create reproducible test points."""
    rng = np.random.default_rng(42)
    return rng.standard_normal((n, 3)) * 5.0


def benchmark(func, warmup=3, iterations=20):
    """Benchmark a function."""
    for _ in range(warmup):
        func()

    start = time.perf_counter()
    for _ in range(iterations):
        func()
    elapsed = time.perf_counter() - start

    return (elapsed / iterations) * 1000


def run_benchmarks():
    """Run batch transform benchmarks."""
    logger.info("=" * 70)
    logger.info("TRANSFORM POINTS BENCHMARKS")
    logger.info("=" * 70)

    transform = Transform.from_position_axis_angle(Vector3(1, 2, 3), Vector3(1, 1, 0), math.pi / 3)
    M = transform.to_matrix()
    R, t = M[:3, :3], M[:3, 3]

    for n in [10_000, 100_000, 1_000_000]:
        logger.info(f"\nDataset size: {n:,} points")
        logger.info("-" * 70)

        points = create_test_points(n)
        out = np.empty_like(points)

        numba_ms = benchmark(lambda: transform.transform_points(points, out=out))
        numpy_ms = benchmark(lambda: points @ R.T + t)

        logger.info(f"  Numba kernel: {numba_ms:8.3f} ms ({n / numba_ms / 1000:7.1f}M points/sec)")
        logger.info(f"  NumPy matmul: {numpy_ms:8.3f} ms ({n / numpy_ms / 1000:7.1f}M points/sec)")

        np.testing.assert_allclose(out, points @ R.T + t, atol=1e-10)


if __name__ == "__main__":
    run_benchmarks()
