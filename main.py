from __future__ import annotations

import argparse
import json
import logging

from aggregate import get_dynamic_data
from aggregate import get_static_data
from collectors.factory import get_collector
from helper.callbacks import run_blocking
from helper.logs import init_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """
    One-shot inventory snapshot printed as JSON.

        python main.py                  # static data
        python main.py --dynamic nginx  # time, load, memory and the nginx service
    """
    parser = argparse.ArgumentParser(description='Print a host inventory snapshot as JSON.')
    parser.add_argument('--dynamic', metavar='SERVICES', help='dynamic data for the given services instead')
    parser.add_argument('--indent', type=int, default=2)
    args = parser.parse_args(argv)

    init_logging()
    collector = get_collector()
    logger.info(f"Loaded collector for: {collector.__class__.__name__}")

    if args.dynamic is not None:
        data = run_blocking(get_dynamic_data(collector, args.dynamic))
    else:
        data = run_blocking(get_static_data(collector))

    print(json.dumps(data.to_json(), indent=args.indent))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
