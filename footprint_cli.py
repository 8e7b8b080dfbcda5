#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
A tool for measuring the deployment footprint of a managed application.

Features:
- Managed assembly closure via assembly references
- Native libraries reached through P/Invoke and the dynamic linker
- Debug symbol and misc data accounting
- Optional stripping of native binaries before measurement
- Blacklist filtering and CSV export
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional, TextIO

from footprint.core.config import FootprintConfig, load_config
from footprint.core.exceptions import ConfigError, FootprintError, format_exception
from footprint.core.logging import setup_logging_from_config
from footprint.discovery import DiscoveryEngine
from footprint.report import BinaryStripper, build_manifest, export_csv, load_blacklist, render_manifest

logger = logging.getLogger("footprint.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="footprint",
        description="Measure the files a managed application needs at run time.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s /opt/app                           # Report the closure of /opt/app
  %(prog)s /opt/app --no-strip                # Measure native files unstripped
  %(prog)s /opt/app --mdb                     # Include .mdb debug symbols
  %(prog)s /opt/app -b blacklist.txt          # Exclude files by name prefix
  %(prog)s /opt/app --csv footprint.csv       # Also export a CSV report
        """
    )

    parser.add_argument("paths", nargs="*", help="Files or directories to analyze")
    parser.add_argument("-m", "--mono", metavar="BINARY",
                        help="Runtime binary walked once any assembly loaded (Default: /usr/bin/mono)")
    parser.add_argument("-s", "--strip", dest="strip", action="store_true", default=None,
                        help="Strip native binaries of debug symbols before measuring (Default)")
    parser.add_argument("--no-strip", dest="strip", action="store_false",
                        help="Measure native binaries as they are on disk")
    parser.add_argument("-d", "--mdb", action="store_true", default=None,
                        help="Include .mdb files in the summary")
    parser.add_argument("-b", "--blacklist", metavar="FILE",
                        help="File of name prefixes excluded from the summary")
    parser.add_argument("-c", "--config", metavar="FILE",
                        help="YAML configuration file")
    parser.add_argument("--csv", metavar="PATH",
                        help="Also export the manifest as CSV")
    parser.add_argument("--log-file", metavar="FILE",
                        help="Write a detailed log to FILE")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show verbose logs")
    return parser


def apply_arguments(config: FootprintConfig, args: argparse.Namespace) -> FootprintConfig:
    """Command-line options take precedence over file and environment settings."""
    if args.mono is not None:
        config.runtime_binary = args.mono
    if args.strip is not None:
        config.strip_binaries = args.strip
    if args.mdb is not None:
        config.include_debug = args.mdb
    if args.blacklist is not None:
        config.blacklist_file = Path(args.blacklist)
    if args.log_file is not None:
        config.log_file = Path(args.log_file)
    if args.verbose:
        config.log_level = "DEBUG"
    return config


def print_configuration(config: FootprintConfig, paths: List[str],
                        environ: Mapping[str, str] = None, out: TextIO = None) -> None:
    """Echo the effective environment and command line."""
    out = out or sys.stdout
    environ = environ if environ is not None else os.environ

    out.write("Footprint Configuration:\n")
    for env in (config.search_path_env, config.assembly_path_env):
        value = environ.get(env)
        if value:
            out.write(f"  $ export {env}={value}\n")

    words = ["footprint"]
    if config.runtime_binary:
        words.append(f"--mono={config.runtime_binary}")
    if config.blacklist_file is not None:
        words.append(f"--blacklist={config.blacklist_file}")
    if not config.strip_binaries:
        words.append("--no-strip")
    if config.include_debug:
        words.append("--mdb")
    words.extend(paths)
    out.write(f"  $ {' '.join(words)}\n")
    out.write("\n")


def run(config: FootprintConfig, paths: List[str], csv_path: Optional[str] = None,
        out: TextIO = None) -> None:
    """Discover the closure of paths and print the manifest."""
    out = out or sys.stdout

    blacklist = load_blacklist(config.blacklist_file) if config.blacklist_file else []
    context = DiscoveryEngine(config).discover(paths)

    with BinaryStripper(config.strip_command) as stripper:
        manifest = build_manifest(
            context.files,
            strip_binaries=config.strip_binaries,
            include_debug=config.include_debug,
            blacklist=blacklist,
            stripper=stripper,
        )

    render_manifest(manifest, out)

    if csv_path:
        export_csv(manifest, csv_path)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = apply_arguments(load_config(args.config), args)
        config.check()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging_from_config(config)

    print_configuration(config, args.paths)

    if not args.paths:
        print("Error: no paths to analyze")
        return 1

    try:
        run(config, args.paths, csv_path=args.csv)
    except FootprintError as e:
        logger.error(format_exception(e))
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
