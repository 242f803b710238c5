"""
2D Boids Simulation
===================

Flocking from three local rules: separation, alignment and cohesion.

Usage:
    python main.py                          # Open a window with the default flock
    python main.py --count 300 --seed 7     # Smaller, reproducible flock
    python main.py --backend python         # Evaluate rules through Boid methods
    python main.py --neighbors grid         # Spatial grid instead of a full scan
    python main.py --headless --ticks 500   # No window, print progress

Controls:
    - ESC / Q: Quit
"""

import argparse
import time

from config import boids as config
from boids import Flock, FlockSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2D boids flocking simulation")
    parser.add_argument("--count", type=int, default=None,
                        help=f"number of boids (default {config.BOIDS['count']})")
    parser.add_argument("--seed", type=int, default=config.SIMULATION["seed"],
                        help="seed for the initial flock")
    parser.add_argument("--backend", choices=["python", "numba"],
                        default=config.SIMULATION["backend"],
                        help="steering evaluation backend")
    parser.add_argument("--neighbors", choices=["brute", "grid"],
                        default=config.SIMULATION["neighbors"],
                        help="neighbor search strategy")
    parser.add_argument("--headless", action="store_true",
                        help="run without a window")
    parser.add_argument("--ticks", type=int, default=600,
                        help="ticks to run in headless mode")
    parser.add_argument("--report-every", type=int, default=100,
                        help="headless progress interval in ticks")
    return parser


def run_headless(flock: Flock, ticks: int, report_every: int) -> Flock:
    """Advance the flock without a window, printing progress."""
    print(f"[Headless] {flock.num_boids} boids, {ticks} ticks, "
          f"backend={flock.backend}")
    start = time.time()

    for tick in range(1, ticks + 1):
        flock.update()
        if report_every > 0 and tick % report_every == 0:
            elapsed = time.time() - start
            print(f"[Headless] Tick {tick}/{ticks}  "
                  f"polarization={flock.polarization():.3f}  "
                  f"{tick / max(elapsed, 1e-9):.1f} ticks/s")

    print(f"[Headless] Done in {time.time() - start:.2f}s")
    return flock


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.count is not None and args.count <= 0:
        parser.error("--count must be positive")
    if args.ticks < 0:
        parser.error("--ticks must be non-negative")

    settings = FlockSettings.from_config(count=args.count)
    flock = Flock(settings, seed=args.seed, neighbor_index=args.neighbors, backend=args.backend)

    if args.headless:
        return run_headless(flock, args.ticks, args.report_every)

    from core import Application

    app = Application(flock)
    app.run()
    return flock


if __name__ == "__main__":
    main()
