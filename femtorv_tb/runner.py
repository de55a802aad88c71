#!/usr/bin/env python3
"""
Build the FemtoRV32 RTL and run a program image on it under cocotb.

Example:

    python -m femtorv_tb rtl/femtorv32_quark.v --toplevel FemtoRV32 \\
        --program memory.hex --max-time 2000 --waves

Settings reach the cocotb test (femtorv_tb.bench) through the environment
knobs documented in config.py. The run succeeds whether it ends by time
budget or by trap.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from cocotb_tools.check_results import get_results
from cocotb_tools.runner import get_runner

from .config import ConfigError, HarnessConfig

log = logging.getLogger(__name__)

DEFAULT_BUILD_DIR = Path("build") / "sim"


def _anyint(x):
    return int(x, 0)


def build_parser():
    parser = argparse.ArgumentParser(prog="femtorv_tb", description=__doc__.strip().splitlines()[0])
    parser.add_argument("sources", nargs="+", type=Path, help="HDL source files")
    parser.add_argument("--toplevel", default="FemtoRV32")
    parser.add_argument("--sim", default=os.environ.get("SIM", "verilator"))
    parser.add_argument("--program", help="program image (default: memory.hex)")
    parser.add_argument("--max-time", type=_anyint, help="simulated time budget")
    parser.add_argument("--reset-toggles", type=_anyint, help="clock toggles with reset held")
    parser.add_argument("--memory-words", type=_anyint, help="minimum memory size in words")
    parser.add_argument("--no-decode", action="store_true", help="don't log decoded fetches")
    parser.add_argument("--build-dir", type=Path, default=DEFAULT_BUILD_DIR)
    parser.add_argument("--waves", action="store_true", help="dump simulator waveforms")
    parser.add_argument("-v", "--verbose", action="store_true", help="per-cycle bus log")
    return parser


def config_from_args(args):
    return HarnessConfig().with_overrides(
        # the simulator runs inside build_dir, so relative paths would miss
        program=str(Path(args.program or HarnessConfig.program).resolve()),
        max_time=args.max_time,
        reset_toggles=args.reset_toggles,
        memory_words=args.memory_words,
        decode=False if args.no_decode else None,
        log_level="DEBUG" if args.verbose else None,
    ).validate()


def run(args, config):
    """Build and run the cocotb bench. Returns the process exit status."""
    runner = get_runner(args.sim)
    runner.build(
        sources=[p.resolve() for p in args.sources],
        hdl_toplevel=args.toplevel,
        build_dir=args.build_dir,
        waves=args.waves,
        always=True,
    )
    extra_env = config.to_env()
    if args.verbose:
        extra_env["COCOTB_LOG_LEVEL"] = "DEBUG"
    results_xml = runner.test(
        hdl_toplevel=args.toplevel,
        test_module="femtorv_tb.bench",
        build_dir=args.build_dir,
        waves=args.waves,
        extra_env=extra_env,
    )
    num_tests, num_failed = get_results(results_xml)
    log.info("cocotb: %d test(s), %d failed", num_tests, num_failed)
    return 1 if num_failed else 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)-8s %(name)s: %(message)s",
    )
    try:
        config = config_from_args(args)
    except ConfigError as exc:
        log.error("%s", exc)
        return 2
    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())
