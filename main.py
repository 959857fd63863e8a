"""Main runner for loading numeric CSV files.

Usage: python main.py --input <path/to/file.csv> [--outdir results]
       python main.py --indir data --comment "#" --allow-trailing-delimiter
"""
from __future__ import annotations
import argparse
import glob
import json
import logging
import os
import sys
from numcsv.io import load_numeric_csv
from numcsv.reader import NumCSVError, ReaderOptions


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Tolerant numeric CSV loader")
    p.add_argument("--input", required=False, help="Path to a numeric CSV file (optional)")
    p.add_argument("--indir", default="data", help="Directory to scan for .csv files")
    p.add_argument("--outdir", default="results", help="Directory to write summaries.json (default: results)")
    p.add_argument("--delimiter", default=",", help="Field delimiter (default: ',')")
    p.add_argument("--heading-delimiter", default=None, help="Heading delimiter (default: same as --delimiter)")
    p.add_argument("--allow-trailing-delimiter", action="store_true",
                   help="Accept a delimiter at the end of the heading line")
    p.add_argument("--comment", default="", help="Prefix of comment lines before the heading")
    p.add_argument("--fields", type=int, default=0, help="Expected fields per row (0 = infer)")
    p.add_argument("--no-heading", action="store_true", help="Input has no heading row")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def _unescape(delimiter):
    # shells pass "\t" through as a literal backslash-t
    if delimiter is None:
        return None
    return delimiter.replace("\\t", "\t")


def options_from_args(args: argparse.Namespace) -> ReaderOptions:
    return ReaderOptions(
        delimiter=_unescape(args.delimiter),
        heading_delimiter=_unescape(args.heading_delimiter),
        allow_trailing_delimiter=args.allow_trailing_delimiter,
        comment=args.comment,
        field_count=args.fields,
        skip_heading=args.no_heading,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        options = options_from_args(args)
    except ValueError as e:
        print(f"Invalid reader options: {e}")
        return 2

    # Determine files to process: either a single input file, or all .csv in indir
    if args.input:
        files = [args.input]
    else:
        files = sorted(glob.glob(os.path.join(args.indir, '*.csv')))

    if not files:
        print(f"No input files found (input={args.input}, indir={args.indir}). Exiting.")
        return 1

    summaries = {}
    failed = []
    for filepath in files:
        try:
            heading, arr = load_numeric_csv(filepath, options)
        except (NumCSVError, OSError) as e:
            print(f"Failed to read {filepath}: {e}")
            failed.append(filepath)
            continue

        label = os.path.splitext(os.path.basename(filepath))[0]
        summaries[label] = {
            'path': filepath,
            'n_rows': int(arr.shape[0]),
            'n_columns': int(arr.shape[1]),
            'heading': heading,
        }
        print(f"{label}: {arr.shape[0]} rows x {arr.shape[1]} columns")
        if heading is not None:
            print(f"  heading: {', '.join(heading)}")

    os.makedirs(args.outdir, exist_ok=True)
    with open(os.path.join(args.outdir, 'summaries.json'), 'w') as fh:
        json.dump(summaries, fh, indent=2, allow_nan=False)

    print(f"Summaries written to: {args.outdir}")
    if failed:
        print(f"{len(failed)} of {len(files)} files could not be read")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
