#!/usr/bin/env python3
# tgzpack: Packages a source tree and its install script into a delivery archive.
# Copyright (C) 2025 Dank A. Saurus

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

# -*- coding: utf-8 -*-

"""
tgzpack command-line entry point.

Packages <directory_to_archive> into a delivery archive at <output_path>.
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

from . import config, errors, logger, utils, validation
from .logger import log
from .pipeline import PackagingPipeline
from .settings import save_setting, settings


class CustomHelpFormatter(
    argparse.RawTextHelpFormatter, argparse.ArgumentDefaultsHelpFormatter
):
    """Custom formatter for argparse help messages."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tgzpack",
        description="Package a source tree and its install script into a delivery archive.",
        formatter_class=CustomHelpFormatter,
        epilog=(
            "Run `tgzpack settings [KEY VALUE]` to view or change saved settings.\n"
            "To package a directory named `settings`, write `tgzpack -- settings OUT`."
        ),
    )
    parser.add_argument(
        "directory",
        nargs="?",
        help="The source directory to archive.",
    )
    parser.add_argument(
        "output",
        nargs="?",
        help="Path of the final archive. Must not be an existing directory.",
    )
    parser.add_argument(
        "--compression",
        choices=["gzip", "none"],
        default=settings["compression"],
        help="Compression applied to both archives.",
    )
    parser.add_argument(
        "--script",
        type=str,
        default=settings["install_script_name"],
        metavar="NAME",
        help="Name of the install script inside the source directory.",
    )
    parser.add_argument(
        "--marker",
        type=str,
        default=settings["backup_marker"],
        metavar="TEXT",
        help="Marker line after which the backup list is written.",
    )
    parser.add_argument(
        "-b",
        "--backup",
        action="append",
        metavar="PATH",
        help="Path to list in the install script's backup section (can be used multiple times).\n"
        "Defaults to every packaged file.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show debug messages on the console.",
    )
    return parser


def run_settings_command(args_list: list[str]) -> None:
    """Shows all settings, or updates one with `settings KEY VALUE`."""
    if not args_list:
        print(json.dumps(settings, indent=2))
        return
    if len(args_list) != 2:
        print("Usage: tgzpack settings [KEY VALUE]")
        return
    save_setting(args_list[0], args_list[1])


def run_package_command(args: argparse.Namespace) -> None:
    """Validates the arguments and runs the packaging pipeline."""
    validated = validation.validate_args([args.directory, args.output])

    pipeline = PackagingPipeline.from_settings(
        validated.directory,
        validated.output,
        settings,
        install_script_name=args.script,
        backup_marker=args.marker,
        compression=args.compression,
        backup_paths=args.backup,
    )
    print(
        f"{utils.SYSTEM_MSG}--> Packaging '{pipeline.source_dir}' into "
        f"'{pipeline.output_path}'...{utils.RESET_COLOR}"
    )
    result = pipeline.run()
    print(
        f"{utils.SUCCESS_MSG}--> Packaged {len(result.files)} file(s): "
        f"{result.output_path}{utils.RESET_COLOR}"
    )


def main():
    """Parses arguments and orchestrates the application flow."""
    load_dotenv(dotenv_path=config.DOTENV_FILE)

    args_list = sys.argv[1:]
    if args_list and args_list[0] == "settings":
        run_settings_command(args_list[1:])
        return

    parser = build_parser()
    args = parser.parse_args(args_list)

    if args.debug:
        logger.set_console_level("DEBUG")
    else:
        logger.set_console_level(
            os.getenv(config.LOG_LEVEL_ENV_VAR) or settings["log_level"]
        )

    # Missing arguments are a no-op, not a failure.
    if not args.directory or not args.output:
        parser.print_usage(sys.stdout)
        return

    try:
        run_package_command(args)
    except errors.TgzpackError as e:
        log.error("%s failed: %s", type(e).__name__, e)
        print(f"{utils.ERROR_MSG}Error: {e}{utils.RESET_COLOR}", file=sys.stderr)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
