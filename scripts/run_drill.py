#!/usr/bin/env python
"""
Run a pump-panel training drill headless and print its timeline

Usage:
    python scripts/run_drill.py --drill tank_attack
    python scripts/run_drill.py --drill relief_valve --dt 0.1 --every 20
    python scripts/run_drill.py --drill drafting --plot drafting.png

Output:
    Timeline table (RPM, PDP, intake, flow, DRV bypass, foam, tank, pump temp)
    and the alerts active at the end of the drill.
"""

import sys
import argparse
import logging
from pathlib import Path

import numpy as np
import pandas as pd

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pumpsim.scenarios import DRILLS, DrillRunner, build_drill

logger = logging.getLogger("run_drill")


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Run a scripted pump-panel drill through the simulation core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Booster-tank attack line
  python scripts/run_drill.py --drill tank_attack

  # Coarser ticks, print every 5 s
  python scripts/run_drill.py --drill hydrant_supply --dt 0.5 --every 10
        """
    )

    parser.add_argument(
        "--drill",
        choices=DRILLS,
        default="tank_attack",
        help="Drill to run (default: tank_attack)"
    )

    parser.add_argument(
        "--dt",
        type=float,
        default=0.1,
        help="Tick period in seconds (default: 0.1)"
    )

    parser.add_argument(
        "--every",
        type=int,
        default=10,
        help="Print every N-th tick (default: 10)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for randomized drill parameters (default: 0)"
    )

    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Save a PNG with PDP/RPM/flow traces to this path"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging"
    )

    return parser.parse_args()


def plot_timeline(df: pd.DataFrame, title: str, path: Path) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    cols = ["pdp", "rpm", "total_gpm", "intake_psi", "bypass_gpm", "pump_temp_f"]
    fig, axes = plt.subplots(len(cols), 1, figsize=(12, 14), sharex=True)
    for ax, name in zip(axes, cols):
        ax.plot(df["time"], df[name], lw=1)
        ax.set_title(name, fontsize=10)
        ax.grid(True, alpha=0.3)
    axes[-1].set_xlabel("time, s")
    fig.suptitle(title, fontsize=14)
    fig.tight_layout()
    fig.savefig(path, dpi=140)
    plt.close(fig)


def main():
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.dt <= 0:
        print("Error: --dt must be > 0")
        sys.exit(1)
    if args.every < 1:
        print("Error: --every must be >= 1")
        sys.exit(1)

    rng = np.random.default_rng(args.seed)
    profile = build_drill(args.drill, rng)

    print(f"\n{'='*70}")
    print(f"Pump Panel Drill - {profile.name}")
    print(f"{'='*70}")
    print(f"{profile.description}")
    print(f"Duration: {profile.duration_s:.0f} s, tick {args.dt*1000:.0f} ms")
    print(f"{'='*70}\n")

    try:
        result = DrillRunner(rng=rng).run(profile, dt=args.dt)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)

    df = pd.DataFrame(result.timeline)
    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(df.iloc[args.every - 1 :: args.every].round(1).to_string(index=False))

    print("\nPeak values:")
    print(df.drop(columns=["time"]).max().round(1).to_string())

    print("\nAlerts at end of drill:")
    for alert in result.alerts:
        print(f"  [{alert.severity.value:>7}] {alert.kind.value:<12} {alert.message}")
    if result.alert_kinds_seen:
        print(f"\nAlert kinds seen: {', '.join(result.alert_kinds_seen)}")

    if args.plot:
        out = Path(args.plot)
        out.parent.mkdir(parents=True, exist_ok=True)
        plot_timeline(df, f"drill={profile.name}", out)
        logger.info("Plot saved: %s", out.resolve())


if __name__ == "__main__":
    main()
