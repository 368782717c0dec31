#!/usr/bin/env python3
"""
prettystream command-line interface.

Usage:
    python -m prettystream                        # Arrow plot of the demo field
    python -m prettystream --style all            # Field plus all four styles
    python -m prettystream --no-show -o out.png   # Save without a window
    python -m prettystream --version              # Show version
"""

import argparse
import sys
from pathlib import Path

STYLES = ("line", "arrow", "taper", "texture")
FIGURES = ("field",) + STYLES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='prettystream',
        description='prettystream - evenly-spaced streamlines for 2D vector fields',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m prettystream --style taper                  # Tapered demo plot
  python -m prettystream --d-sep 0.05 --d-test 0.025    # Denser streamlines
  python -m prettystream --style all -o demo.png        # Writes demo_field.png, demo_line.png, ...

The demo field is the gradient of x*exp(-x^2-y^2) on [-2, 2]^2.
"""
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'prettystream {get_version()}'
    )
    parser.add_argument(
        '--style',
        choices=FIGURES + ("all",),
        default='arrow',
        help='Rendering style, or "field" for the vector field itself (default: arrow)'
    )
    parser.add_argument('--d-sep', type=float, default=0.1, help='Separation distance (default: 0.1)')
    parser.add_argument('--d-test', type=float, default=None,
                        help='Termination distance (default: d_sep / 2)')
    parser.add_argument('--resolution', type=int, default=20, help='Demo grid nodes per axis (default: 20)')
    parser.add_argument('--integrator', choices=('euler', 'rk2', 'rk4'), default=None,
                        help='Integration scheme (default: package config)')
    parser.add_argument('-o', '--output', type=Path, default=None,
                        help='Save the figure(s); with --style all the style is appended to the name')
    parser.add_argument('--no-show', action='store_true', help='Do not open a window')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print a run summary and memory use')
    return parser


def _output_path(output: Path, style: str, several: bool) -> Path:
    if not several:
        return output
    return output.with_name(f"{output.stem}_{style}{output.suffix or '.png'}")


def main(argv=None) -> int:
    """Command-line interface for prettystream."""
    args = build_parser().parse_args(argv)

    # Import here to avoid slow startup for --version
    import matplotlib.pyplot as plt
    from . import (
        EvenSeeder, IntegrationOptions, SeedingOptions, Timer, timeit,
        analyze_streamlines, demo_field, plot_vector_field,
        plot_stream_arrow, plot_stream_line, plot_stream_taper, plot_stream_texture,
    )

    if args.no_show:
        plt.switch_backend("Agg")

    d_test = args.d_test if args.d_test is not None else 0.5 * args.d_sep
    try:
        field = demo_field(resolution=args.resolution)
        options = SeedingOptions(
            integration=IntegrationOptions(integrator=args.integrator),
            verbose=args.verbose,
        )
        seeder = EvenSeeder(field, d_sep=args.d_sep, d_test=d_test, options=options)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    figures = FIGURES if args.style == "all" else (args.style,)
    dataset = None
    if any(name in STYLES for name in figures):
        with Timer("even_stream_data", track_memory=args.verbose):
            dataset = seeder.run()
        if args.verbose:
            analyze_streamlines(dataset, verbose=True)

    plotters = {
        "line": plot_stream_line,
        "arrow": plot_stream_arrow,
        "taper": plot_stream_taper,
        "texture": plot_stream_texture,
    }
    for name in figures:
        save_path = None
        if args.output is not None:
            save_path = _output_path(args.output, name, len(figures) > 1)
        if name == "field":
            with timeit("plot_vector_field"):
                plot_vector_field(field, title="vector field", show=False, save_path=save_path)
        else:
            with timeit(f"plot_stream_{name}"):
                plotters[name](dataset, title=f"plot_stream_{name}", show=False, save_path=save_path)
        if save_path is not None:
            print(f"💾 Saved {save_path}")

    if not args.no_show:
        plt.show()
    plt.close("all")
    return 0


def get_version():
    """Get prettystream version."""
    from prettystream import __version__
    return __version__


if __name__ == "__main__":
    sys.exit(main())
