"""
Demo: Segregation Emerging from Mild Local Preferences.

The demo:
1. Seeds a square grid with red and blue agents at random
2. Steps the engine until nobody wants to move (or a step limit)
3. Reports how satisfaction and segregation changed
4. Saves before/after figures, or animates the run live with --animate
"""

import argparse
import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from schelling.core import EngineConfig, SegregationEngine
from schelling.analysis import summarize
from schelling.viz import RenderConfig, animate_engine, plot_grid, plot_summary, save_figure


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Schelling segregation model")
    parser.add_argument("--locations", type=int, default=10000, help="Number of candidate cells")
    parser.add_argument("--red", type=float, default=0.25, help="Fraction of RED agents")
    parser.add_argument("--blue", type=float, default=0.25, help="Fraction of BLUE agents")
    parser.add_argument("--threshold", type=float, default=0.7, help="Satisfaction threshold in (0, 1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (non-deterministic if omitted)")
    parser.add_argument("--steps", type=int, default=500, help="Maximum number of steps")
    parser.add_argument("--interval", type=int, default=450, help="Animation interval in ms")
    parser.add_argument("--animate", action="store_true", help="Animate the run instead of saving figures")
    parser.add_argument("--output", type=Path, default=Path("output"), help="Directory for figures")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every step")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the segregation demo."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    print("=" * 60)
    print("Schelling Segregation Demo")
    print("=" * 60)

    config = EngineConfig(
        total_locations=args.locations,
        red_fraction=args.red,
        blue_fraction=args.blue,
        threshold=args.threshold,
    )
    engine = SegregationEngine.from_config(config, rng=np.random.default_rng(args.seed))
    side = engine.grid.side

    print(f"\n1. Grid: {side}x{side}, threshold={config.threshold}")
    render_config = RenderConfig(interval_ms=args.interval)

    if args.animate:
        animation = animate_engine(engine, config=render_config)
        plt.show()
        return animation

    initial = engine.snapshot()
    history = [summarize(engine.read_grid(), config.threshold)]
    print(f"   Satisfied:   {history[0].fraction_satisfied:.3f}")
    print(f"   Segregation: {history[0].segregation_index:.3f}")

    print(f"\n2. Stepping (max {args.steps} steps)...")
    for _ in range(args.steps):
        engine.step()
        history.append(summarize(engine.read_grid(), config.threshold))
        if engine.last_step.stable:
            break

    final = history[-1]
    print(f"   Steps taken: {engine.steps_taken}")
    print(f"   Stable:      {engine.last_step.stable}")
    print(f"   Satisfied:   {final.fraction_satisfied:.3f}")
    print(f"   Segregation: {final.segregation_index:.3f}")
    print(f"   Clusters:    {final.red_clusters} red, {final.blue_clusters} blue")

    print("\n3. Saving figures...")
    args.output.mkdir(exist_ok=True)
    fig, axes = plt.subplots(1, 2, figsize=(12, 6))
    plot_grid(initial.cells, title="Initial", config=render_config, ax=axes[0])
    plot_grid(engine.read_grid(), title=f"After {engine.steps_taken} steps", config=render_config, ax=axes[1])
    save_figure(fig, args.output / "segregation_grid.png")

    fig, _ = plot_summary(history)
    save_figure(fig, args.output / "segregation_summary.png")
    print(f"   Saved to: {args.output}")

    print("\n" + "=" * 60)
    print("Demo complete!")
    print("=" * 60)

    return engine


if __name__ == "__main__":
    main()
