"""
Demo driver: два случайных куба, их суммы и softmax.

    ndtensor-demo --size 10 --seed 7
    python -m ndtensor.sandbox
"""

from __future__ import annotations

import argparse
import sys
from typing import NamedTuple, get_args

from loguru import logger
from pydantic import ValidationError

from ndtensor.config import DemoConfig, LoggingConfig, LogLevel, SamplerConfig, build_sampler
from ndtensor.core.arrays import NdArray
from ndtensor.logging_config import setup_logging


class DemoResult(NamedTuple):
    """Суммы исходных кубов и сумма их softmax (≈ 2.0)."""

    random_sum: float
    softmax_sum: float


def run_demo(config: DemoConfig) -> DemoResult:
    sampler = build_sampler(config.sampler)
    shape = [config.size] * 3

    cube0 = NdArray(shape).fill_random(sampler)
    cube1 = NdArray(shape).fill_random(sampler)

    random_sum = cube0.sum() + cube1.sum()
    softmax_sum = cube0.softmax().sum() + cube1.softmax().sum()

    logger.info("random cubes {}: sum = {:.6f}", shape, random_sum)
    logger.info("softmax sum = {:.12f}", softmax_sum)
    return DemoResult(random_sum, softmax_sum)


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    p = argparse.ArgumentParser(prog="ndtensor-demo", description="Run the ndtensor demo")
    p.add_argument("--size", type=int, default=10, help="Cube side length")
    p.add_argument("--seed", type=int, default=None, help="Sampler seed")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=get_args(LogLevel),
        default="INFO",
        help="Console log level",
    )
    args = p.parse_args(argv)

    try:
        config = DemoConfig(
            size=args.size,
            sampler=SamplerConfig(seed=args.seed),
            logging=LoggingConfig(level=args.log_level),
        )
    except ValidationError as e:
        error = e.errors()[0]
        p.error(f"invalid {error['loc'][0]}: {error['msg']}")

    setup_logging(config.logging)

    result = run_demo(config)
    print(f"random_sum={result.random_sum:.6f} softmax_sum={result.softmax_sum:.12f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
