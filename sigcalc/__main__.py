"""
sigcalc entry point.

Usage:
    python -m sigcalc "2+3*4"
    python -m sigcalc -d speed.csv -d torque.csv "[0]*[1]/9.5488"
    python -m sigcalc --symbolic "(s+1)*(s+2)"
    python -m sigcalc --loglevel DEBUG --log-console -d data.txt "integral([0])"
"""

import sys
import argparse

import numpy as np


def _load_dataset(path: str):
    """Read a two-column (x, y) text file into a Signal."""
    from .core.dataset import Signal

    delimiter = ',' if path.lower().endswith('.csv') else None
    data = np.loadtxt(path, delimiter=delimiter, ndmin=2)
    if data.shape[1] < 2:
        raise ValueError(f"{path}: expected two columns (x, y), found {data.shape[1]}")
    return Signal(data[:, 0], data[:, 1])


def main(argv=None):
    """Main entry point for sigcalc."""
    from .core.settings import load_settings, save_settings
    from .logging import LOG_LEVELS, setup_logging

    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="sigcalc - evaluate math expressions over signal datasets"
    )
    parser.add_argument(
        "expression",
        help="Expression to evaluate; reference datasets as [0], [1], ..."
    )
    parser.add_argument(
        "-d", "--dataset",
        action="append",
        default=[],
        help="Two-column x,y data file (comma-separated if *.csv). "
             "Repeat to add more datasets; the first is [0]"
    )
    parser.add_argument(
        "--symbolic",
        action="store_true",
        help="Solve as a polynomial in s instead of evaluating numerically"
    )
    parser.add_argument(
        "--x-factor",
        type=float,
        default=settings["x_axis_factor"],
        help=f"Factor applied to dataset x values (default: {settings['x_axis_factor']})"
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=settings["print_precision"],
        help=f"Significant digits in printed results (default: {settings['print_precision']})"
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Store --x-factor, --precision, --loglevel and --logfile as the new defaults"
    )
    parser.add_argument(
        "-l", "--loglevel",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings["log_level"],
        help=f"Set logging level (default: {settings['log_level']}). "
             "DEBUG and INFO also write to the log file"
    )
    parser.add_argument(
        "--logfile",
        default=settings["log_file"],
        help=f"Log file path (default: {settings['log_file']})"
    )
    parser.add_argument(
        "--log-console",
        action="store_true",
        help="Also log to console (stderr)"
    )

    args = parser.parse_args(argv)

    setup_logging(
        level=args.loglevel,
        log_file=args.logfile,
        console=args.log_console
    )

    if args.save_defaults:
        settings.update(
            x_axis_factor=args.x_factor,
            print_precision=args.precision,
            log_level=args.loglevel,
            log_file=args.logfile,
        )
        save_settings(settings)

    from .core.dataset import SignalList
    from .core.expression_tree import ExpressionTree

    try:
        registry = SignalList(_load_dataset(path) for path in args.dataset)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    tree = ExpressionTree(registry, precision=args.precision)
    if args.symbolic:
        solution = tree.solve_symbolic(args.expression)
    else:
        solution = tree.solve(args.expression, args.x_factor)

    if not solution.ok:
        print(f"Error: {solution.error}", file=sys.stderr)
        return 1

    value = solution.value
    if isinstance(value, str):
        print(value)
    elif isinstance(value, float):
        print(f"{value:.{args.precision}g}")
    else:
        np.savetxt(sys.stdout, np.column_stack([value.x, value.y]),
                   fmt=f"%.{args.precision}g", delimiter=",")
    return 0


if __name__ == "__main__":
    sys.exit(main())
