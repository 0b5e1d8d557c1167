# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for vert.

This module provides the main CLI entry point for the vert tool.

Commands:

    add: Start tracking a package
    check: Check one package, or every package that is due
    delete: Stop tracking a package
    info: Show one package, or every package with a pending update
    mark: Record the upstream version as installed
    update: Change a package's name, master site or installed version

Example:
    Track sudo from its directory listing:
        ```bash
        $ vert add sudo --url https://www.sudo.ws/dist --release 1.9.14
        ```

    Check everything not checked in the last two hours:
        ```bash
        $ vert check
        ```

    Show outdated packages:
        ```bash
        $ vert info
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration or state error)

Note:
    The CLI uses argparse for command parsing. Each command has its own
    handler function (cmd_<command>). Verbose mode shows full tracebacks on
    errors for debugging.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
import traceback

from vert.config import VertConfig, load_config
from vert.core import check_all, refresh_package
from vert.exceptions import VertError
from vert.io.http import make_session
from vert.logging import get_logger, set_global_logger
from vert.state import PackageTracker


def _open_tracker(config: VertConfig) -> PackageTracker:
    tracker = PackageTracker(config.state_file)
    tracker.load()
    return tracker


def cmd_add(args: argparse.Namespace, config: VertConfig) -> int:
    """Handler for 'vert add'."""
    tracker = _open_tracker(config)
    package = tracker.add(args.pkg, args.url, args.release)
    tracker.save()
    print(f"added {package}")
    return 0


def cmd_check(args: argparse.Namespace, config: VertConfig) -> int:
    """Handler for 'vert check'.

    With a package name, checks that package regardless of when it was
    last checked and prints its details. Without one, checks every package
    that is due, concurrently.
    """
    tracker = _open_tracker(config)

    if args.pkg:
        package = tracker.get(args.pkg)
        with make_session() as session:
            refresh_package(
                package,
                session=session,
                credentials=config.credentials,
                timeout=config.timeout,
            )
        tracker.put(package)
        tracker.save()
        for line in package.describe():
            print(line)
        return 0

    changed = check_all(
        tracker,
        credentials=config.credentials,
        timeout=config.timeout,
        max_workers=config.max_workers,
        interval=config.check_interval,
    )
    print(f"{len(changed)} package(s) with a new version")
    return 0


def cmd_delete(args: argparse.Namespace, config: VertConfig) -> int:
    """Handler for 'vert delete'."""
    tracker = _open_tracker(config)
    package = tracker.delete(args.pkg)
    tracker.save()
    print(f"Removed {package.distname}")
    return 0


def cmd_info(args: argparse.Namespace, config: VertConfig) -> int:
    """Handler for 'vert info'.

    With a package name, prints its details. Without one, lists every
    package that is not at its latest version, then the number of
    packages whose installed version differs from upstream.
    """
    tracker = _open_tracker(config)

    if args.pkg:
        for line in tracker.get(args.pkg).describe():
            print(line)
        return 0

    for package in tracker.packages():
        if not package.is_latest():
            print(package)
    print(f"Total {tracker.pending_count()}")
    return 0


def cmd_mark(args: argparse.Namespace, config: VertConfig) -> int:
    """Handler for 'vert mark'."""
    tracker = _open_tracker(config)
    package, previous, changed = tracker.mark_latest(args.pkg)

    if not changed:
        print(f"Package {package.distname} already has latest version {previous}")
        return 0

    tracker.save()
    if previous is not None:
        print(f"Package {package.distname} updated from {previous} to {package.version}")
    else:
        print(f"Package {package.distname} version set to {package.version}")
    return 0


def cmd_update(args: argparse.Namespace, config: VertConfig) -> int:
    """Handler for 'vert update'."""
    tracker = _open_tracker(config)
    package, changed = tracker.update(
        args.pkg,
        new_name=args.name,
        master_site=args.url,
        local_version=args.release,
    )
    if changed:
        tracker.save()
        print(f"updated {package}")
    else:
        print(f"Nothing to update for {package.distname}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    try:
        vert_version = version("vert")
    except PackageNotFoundError:
        from vert import __version__ as vert_version

    parser = argparse.ArgumentParser(
        prog="vert",
        description="vert - track upstream releases of software packages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"vert {vert_version}",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("vert.yaml"),
        help="Configuration file (default: vert.yaml)",
    )
    parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="Package store (default: from config or state/packages.json)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'add' command
    parser_add = subparsers.add_parser("add", help="Add package")
    parser_add.add_argument("pkg", help="Package name")
    parser_add.add_argument(
        "-l", "--url", required=True, help="Package master site"
    )
    parser_add.add_argument(
        "-r", "--release", required=True, help="Locally installed version"
    )
    parser_add.set_defaults(func=cmd_add)

    # 'check' command
    parser_check = subparsers.add_parser("check", help="Check for new version")
    parser_check.add_argument("pkg", nargs="?", help="Package name")
    parser_check.set_defaults(func=cmd_check)

    # 'delete' command
    parser_delete = subparsers.add_parser("delete", help="Delete package")
    parser_delete.add_argument("pkg", help="Package name")
    parser_delete.set_defaults(func=cmd_delete)

    # 'info' command
    parser_info = subparsers.add_parser(
        "info", help="Display information about package"
    )
    parser_info.add_argument("pkg", nargs="?", help="Package name")
    parser_info.set_defaults(func=cmd_info)

    # 'mark' command
    parser_mark = subparsers.add_parser("mark", help="Mark as updated")
    parser_mark.add_argument("pkg", help="Package name")
    parser_mark.set_defaults(func=cmd_mark)

    # 'update' command
    parser_update = subparsers.add_parser("update", help="Update package")
    parser_update.add_argument("pkg", help="Package name")
    parser_update.add_argument("-l", "--url", help="Package master site")
    parser_update.add_argument("-n", "--name", help="New package name")
    parser_update.add_argument(
        "-r", "--release", help="Locally installed version"
    )
    parser_update.set_defaults(func=cmd_update)

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse 'argv', dispatch, and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        config = load_config(args.config, state_file=args.state_file)
        return args.func(args, config)
    except VertError as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            traceback.print_exc()
        return 1


def main() -> None:
    """Main entry point for the vert CLI.

    This function is registered as the 'vert' console script in pyproject.toml.
    """
    sys.exit(run())


if __name__ == "__main__":
    main()
