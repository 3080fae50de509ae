"""
main.py — Command-line driver for random integer partitions.

Usage
-----
    python -m boltzmann_partitions.main \
        --target 100 \
        --policy even \
        --method pdc \
        --samples 5 \
        --seed 42 \
        --ferrers

The run:
    1. Build the restriction policy and a seeded sampler.
    2. Solve the Boltzmann tilt once for the target weight.
    3. Draw each sample with the chosen method and print it.
    4. Optionally record samples in SQLite and compare the exact-weight
       methods by attempts per sample.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from .config import ConditionerConfig, PolicyConfig, RunConfig
from .errors import PartitionSamplingError
from .policy.restrictions import POLICY_NAMES, build_policy, policy_name
from .render.ferrers import ferrers_diagram, format_stream
from .sampling.sampler import METHODS, PartitionSampler
from .stats.diagnostics import compare_conditioners
from .store.results import SampleDB

logger = logging.getLogger("partitions")


def run(cfg: RunConfig) -> list[dict[int, int]]:
    """Draw ``cfg.n_samples`` partitions and return their multiplicities."""

    policy = build_policy(cfg.policy)
    name = policy_name(policy)
    sampler = PartitionSampler(
        policy=policy,
        seed=cfg.seed,
        solver=cfg.solver,
        conditioner=cfg.conditioner,
    )

    tilt = cfg.manual_tilt
    if tilt is None and cfg.target > 0 and sampler.state.support(cfg.target).size:
        tilt = sampler.tilt(cfg.target)

    logger.info(
        "═══ SAMPLING START ═══  policy=%s  n=%d  method=%s  samples=%d  tilt=%s",
        name, cfg.target, cfg.method, cfg.n_samples,
        f"{tilt:.8f}" if tilt is not None else "n/a",
    )

    db = SampleDB(cfg.db_path) if cfg.db_path else None
    results: list[dict[int, int]] = []
    start = time.perf_counter()
    try:
        for k in range(cfg.n_samples):
            state = sampler.draw(cfg.target, cfg.method, tilt)
            results.append(state.as_dict())

            print(format_stream(state))
            if cfg.show_ferrers:
                print(ferrers_diagram(state))
                print()

            logger.debug(
                "[sample %3d] weight=%d  parts=%d  attempts=%d",
                k, state.weight, state.num_parts, state.last_attempts,
            )
            if db is not None:
                db.insert(
                    policy=name,
                    target=cfg.target,
                    method=cfg.method,
                    multiplicities=state.multiplicities,
                    tilt=tilt,
                    attempts=state.last_attempts,
                )
    finally:
        if db is not None:
            db.close()

    elapsed = time.perf_counter() - start
    logger.info("═══ SAMPLING COMPLETE ═══  %d samples in %.3f s", len(results), elapsed)

    if cfg.compare:
        compare_conditioners(
            policy,
            cfg.target,
            n_samples=max(cfg.n_samples, 10),
            rng=cfg.seed,
            conditioner=cfg.conditioner,
            solver=cfg.solver,
        )
    return results


# ── CLI ────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="partitions",
        description="Random integer partitions via Boltzmann sampling",
    )
    parser.add_argument("--target", type=int, required=True, help="Weight n of the partition")
    parser.add_argument("--policy", default="unrestricted", choices=list(POLICY_NAMES))
    parser.add_argument("--method", default="default", choices=list(METHODS))
    parser.add_argument("--samples", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--tilt", type=float, default=None, help="Manual tilt in (0, 1)")
    parser.add_argument("--max-attempts", type=int, default=ConditionerConfig().max_attempts)
    parser.add_argument("--max-part", type=int, default=10)
    parser.add_argument("--min-part", type=int, default=4)
    parser.add_argument("--j", type=int, default=5)
    parser.add_argument("--m", type=int, default=7)
    parser.add_argument("--ferrers", action="store_true", help="Also print the Ferrers diagram")
    parser.add_argument("--db", default=None, help="SQLite file to record samples in")
    parser.add_argument("--compare", action="store_true", help="Compare PDC vs rejection")
    parser.add_argument("--log-file", default="partitions.log")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if args.log_file:
        handlers.append(logging.FileHandler(args.log_file))
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )

    cfg = RunConfig(
        target=args.target,
        n_samples=args.samples,
        method=args.method,
        seed=args.seed,
        manual_tilt=args.tilt,
        show_ferrers=args.ferrers,
        db_path=args.db,
        compare=args.compare,
        policy=PolicyConfig(
            name=args.policy,
            max_part=args.max_part,
            min_part=args.min_part,
            j=args.j,
            m=args.m,
        ),
        conditioner=ConditionerConfig(max_attempts=args.max_attempts),
    )

    try:
        run(cfg)
    except (PartitionSamplingError, ValueError) as exc:
        logger.error("Sampling failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
