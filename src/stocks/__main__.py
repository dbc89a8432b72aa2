"""
stocks — lagged transforms and metrics from the command line.

    stocks diffs 1 2 4 8                 Lagged differences (lag 1)
    stocks pchanges 10 5 20 --lag 2      Percent changes over 2 steps
    stocks ratios 1 2 4 8
    cat prices.txt | stocks metric cagr --prices
    stocks metric mdd 0.01 -0.02 0.03 --units-year 12
"""

import argparse
import logging
import sys

import numpy as np
import yaml

TRANSFORMS = ('diffs', 'pdiffs', 'pchanges', 'ratios')


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stocks',
        description='Lagged transforms and performance metrics for one numeric series.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  stocks diffs 1 2 4 8
  stocks pdiffs 10 5 20 --lag 2
  stocks metric cagr 100 101 99 104 --prices --units-year 12
  seq 1 10 | stocks ratios                 Values may come from stdin
""",
    )
    parser.add_argument('--config', help='YAML file of config overrides')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    for name in TRANSFORMS:
        sub = subparsers.add_parser(name, help=f'Compute {name} of a series')
        sub.add_argument('values', nargs='*', type=float, help='Series values (default: stdin)')
        if name != 'ratios':
            sub.add_argument('--lag', type=int, default=None,
                             help='Offset between compared values (default: 1)')

    metric = subparsers.add_parser('metric', help='Compute one performance metric')
    metric.add_argument('name', help='Metric name, e.g. cagr, mdd, sharpe')
    metric.add_argument('values', nargs='*', type=float, help='Gains (default: stdin)')
    metric.add_argument('--prices', action='store_true',
                        help='Values are prices; convert to gains first')
    metric.add_argument('--units-year', type=float, default=None,
                        help='Observations per year (default: 252)')
    return parser


def _read_values(values):
    from stocks.lagged import InvalidArgument

    if values:
        return np.asarray(values, dtype=np.float64)
    tokens = sys.stdin.read().split()
    try:
        return np.asarray([float(tok) for tok in tokens], dtype=np.float64)
    except ValueError as e:
        raise InvalidArgument(f"non-numeric value on stdin: {e}") from None


def _run(args) -> None:
    from stocks import lagged
    from stocks.config import get as get_config
    from stocks.gains import prices_to_gains
    from stocks.metrics import calc_metric

    values = _read_values(args.values)

    if args.command in TRANSFORMS:
        func = getattr(lagged, args.command)
        result = func(values) if args.command == 'ratios' else func(values, args.lag)
        for v in result:
            print(repr(float(v)))
        return

    gains = prices_to_gains(values) if args.prices else values
    units_year = args.units_year
    if units_year is None:
        units_year = get_config('units_year.day', 252)
    print(repr(calc_metric(gains, args.name, units_year=units_year)))


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    from stocks.lagged import InvalidArgument

    try:
        if args.config:
            from stocks.config import load
            load(args.config)
        _run(args)
    except (InvalidArgument, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
