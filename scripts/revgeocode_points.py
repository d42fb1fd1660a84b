# Script that reverse geocodes a CSV of lon/lat points and writes the address components
from argparse import ArgumentParser
import logging

import pandas as pd
from dotenv import load_dotenv

from revgeocode import ReverseGeocoder, geocode_query_check
from revgeocode.settings import settings

from pathlib import Path

if __name__ == '__main__':
    load_dotenv()
    logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    parser = ArgumentParser()
    parser.add_argument('input', type=Path)
    parser.add_argument('--outfile', '-o', type=Path, default=Path('./revgeocoded.csv'))
    parser.add_argument('--source', '-s', choices=['google', 'osm'], default='google')
    parser.add_argument('--lon-col', default='lon')
    parser.add_argument('--lat-col', default='lat')
    parser.add_argument('--client', default='')
    parser.add_argument('--signature', default='')
    parser.add_argument('--override-limit', action='store_true')
    parser.add_argument('--verbose', '-v', action='store_true')
    args = parser.parse_args()

    points = pd.read_csv(args.input)
    locations = list(zip(points[args.lon_col], points[args.lat_col]))

    status = geocode_query_check(business=bool(args.client))
    if status.remaining < len(locations) and not args.override_limit:
        print(f'Only {status.remaining} queries remain today; {len(locations) - status.remaining} points will come back empty')

    geocoder = ReverseGeocoder()
    table = geocoder.reverse_geocode_batch(
        locations,
        output='more',
        progress=True,
        source=args.source,
        client=args.client,
        signature=args.signature,
        override_limit=args.override_limit,
        verbose=args.verbose,
    )
    table.to_csv(args.outfile, index=False)
    print(f'Wrote {len(table)} rows to {args.outfile}')
