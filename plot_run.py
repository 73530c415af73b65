"""
Headless run: drive the engine through a manual scheduler and plot how the ball evolves.
Run: python plot_run.py --ticks 3000 --snapshot
"""
import argparse
import os
from typing import Dict

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

import singing_ball as SB
from singing_ball.engine import SimulationConfig, SimulationEngine
from singing_ball.renderer import PygameCanvas, save_frame
from singing_ball.scheduler import ManualScheduler


def collect_run(engine: SimulationEngine, scheduler: ManualScheduler, n_ticks: int) -> Dict:
    """Per-tick radius, speed, mass and cumulative collisions, one row per scheduled frame."""
    radius, speed, mass, collisions = [], [], [], []
    engine.start()
    for _ in range(n_ticks):
        scheduler.run_frame()
        state = engine.state
        radius.append(state.radius)
        speed.append(state.speed)
        mass.append(engine.mass)
        collisions.append(state.collision_count)
    engine.stop()
    return {
        'radius': np.array(radius),
        'speed': np.array(speed),
        'mass': np.array(mass),
        'collisions': np.array(collisions),
    }


def plot_run(run: Dict, out_dir: str):
    os.makedirs(out_dir, exist_ok=True)
    ticks = np.arange(1, len(run['radius']) + 1)

    fig, axes = plt.subplots(3, 1, figsize=(10, 9), sharex=True)
    axes[0].plot(ticks, run['radius'], color='red')
    axes[0].set_ylabel('Radius')
    axes[1].plot(ticks, run['speed'], color='black', alpha=0.7)
    axes[1].set_ylabel('Speed')
    axes[2].plot(ticks, run['mass'], label='Mass')
    axes[2].step(ticks, run['collisions'] / max(1, run['collisions'][-1]),
                 label='Collisions (normalised)', linestyle='--')
    axes[2].set_ylabel('Mass')
    axes[2].set_xlabel('Tick')
    axes[2].legend()
    fig.suptitle('Singing ball run')
    fig.savefig(os.path.join(out_dir, 'singing_ball_run.png'))
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description='Headless singing ball run')
    parser.add_argument('--ticks', type=int, default=3000)
    parser.add_argument('--gravity', type=float, default=SB.GRAVITY)
    parser.add_argument('--velocity-increase', type=float, default=SB.VELOCITY_INCREASE)
    parser.add_argument('--velocity-decay', type=float, default=SB.VELOCITY_DECAY)
    parser.add_argument('--ball-growth', type=float, default=SB.BALL_GROWTH)
    parser.add_argument('--out', default='results/plots')
    parser.add_argument('--snapshot', action='store_true', help='also save the final frame')
    args = parser.parse_args()

    canvas = PygameCanvas(SB.WIDTH, SB.HEIGHT)
    scheduler = ManualScheduler()
    config = SimulationConfig(gravity=args.gravity,
                              velocity_increase=args.velocity_increase,
                              velocity_decay=args.velocity_decay,
                              ball_growth=args.ball_growth)
    engine = SimulationEngine(canvas, scheduler, config)

    run = collect_run(engine, scheduler, args.ticks)
    print(f"Collisions: {run['collisions'][-1]}")
    print(f"Final radius: {run['radius'][-1]:.2f} / {engine.max_ball_radius:.2f}")
    print(f"Peak speed: {run['speed'].max():.3f}")

    plot_run(run, args.out)
    if args.snapshot:
        save_frame(canvas.surface, os.path.join(args.out, 'final_frame.png'))
    print(f"Plots saved to {args.out}/")


if __name__ == '__main__':
    main()
