#!/usr/bin/env python3
"""
RUN_DOUBLE_SLIT: The Reference Ripple Tank Scene
================================================

This demo runs the full slit-diffraction scene:
1. Build the 100x100 lattice (wall at column 50, 15-row slit, source at (50, 0))
2. Step it for a number of ticks with a 16 ms driving clock
3. Record a few probe cells behind the slit
4. Print how much motion made it through the wall
5. Optionally save a 3D view (HTML) and a top-down envelope image (PNG)

Run with:
    python demos/run_double_slit.py
    python demos/run_double_slit.py --ticks 2000 --html artifacts/tank.html --png artifacts/envelope.png
    python demos/run_double_slit.py --config my_scene.json

A config file is JSON with optional sections "lattice", "physics", "drive"
and "clock", e.g.

    {"physics": {"gravity": 0.001}, "drive": {"amplitude": 20}}
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ripple_tank.config import load_params
from ripple_tank.driver import SimulationClock, run_simulation
from ripple_tank.lattice import Lattice
from ripple_tank.logging_config import setup_logging


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description='Run the double-slit ripple tank simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--ticks', type=int, default=1000,
                        help='Number of ticks to simulate (default: 1000)')
    parser.add_argument('--ms-per-tick', type=float, default=None,
                        help='Driving clock increment per tick (default: 16)')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON file with lattice/physics/drive/clock sections')
    parser.add_argument('--html', type=str, default=None,
                        help='Save an interactive 3D view to this HTML file')
    parser.add_argument('--png', type=str, default=None,
                        help='Save the peak displacement image to this PNG file')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = {}
    if args.config:
        with open(args.config, encoding='utf-8') as f:
            config = json.load(f)
    if args.ms_per_tick is not None:
        config.setdefault('clock', {})['ms_per_tick'] = args.ms_per_tick
    params = load_params(config)

    print_header("RIPPLE TANK: DOUBLE SLIT")
    lattice = Lattice.from_params(params['lattice'], physics=params['physics'], drive=params['drive'])
    row, _ = lattice.driven_cell
    print(f"Lattice: {lattice.height} x {lattice.width}, spacing {lattice.spacing}")
    print(f"Wall column: {lattice.wall_column}, slit {lattice.slit_description}")
    print(f"Source: {lattice.driven_cell}, amplitude {lattice.drive.amplitude}, period {lattice.drive.period}")

    probes = [
        (row, lattice.wall_column + 5),
        (row, min(lattice.wall_column + 25, lattice.width - 1)),
        (max(row - 20, 0), min(lattice.wall_column + 25, lattice.width - 1)),
    ]

    print_header(f"Simulating {args.ticks} ticks")
    result = run_simulation(
        lattice,
        args.ticks,
        clock=SimulationClock(params['clock']),
        probes=probes,
        show_progress=True,
    )

    print_header("Results")
    energy = result.energy_by_region()
    print(f"Final time: {result.final_time:.1f}")
    print(f"Mean peak |y| source side: {energy['source_side']:.4f}")
    print(f"Mean peak |y| screen side: {energy['screen_side']:.4f}")
    print("\nProbe summary (max |y|):")
    for column in result.probes.columns[2:]:
        print(f"  {column}: {result.probes[column].abs().max():.4f}")

    if args.html:
        from ripple_tank.viz import plot_lattice_3d
        stride = 1 if lattice.width * lattice.height <= 2500 else 2
        plot_lattice_3d(lattice, title=f"Ripple tank after {args.ticks} ticks",
                        outpath=args.html, stride=stride)
        print(f"\n3D view saved to: {args.html}")

    if args.png:
        from ripple_tank.viz import plot_displacement_field
        plot_displacement_field(result.peak_displacement, wall_column=lattice.wall_column,
                                title="Peak |y| (interference envelope)", outpath=args.png)
        print(f"Envelope image saved to: {args.png}")


if __name__ == '__main__':
    main()
