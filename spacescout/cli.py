from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import ScanSettings
from .drives import disk_for_path, list_disks
from .errors import CancelledError, ScanError
from .events import PROGRESS_EVENT
from .scanner import Scanner
from .utils import format_size


def _print_disks(out):
    for d in list_disks():
        out.write(f" {format_size(d.used):>9s} / {format_size(d.total):>9s}  {d.mount_point}\n")


def _print_tree(tree, out):
    for c in tree.children:
        suffix = "/" if c.is_dir else ""
        out.write(f" {format_size(c.size):>9s}  {c.name}{suffix}\n")
    out.write("   -----\n")
    out.write(f" {format_size(tree.size):>9s}  {tree.name} ({tree.path})\n")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="spacescout",
                                 description="Show where the disk space below PATH goes.")
    ap.add_argument("path", nargs="?", default="~")
    ap.add_argument("--json", action="store_true", help="print the tree as JSON")
    ap.add_argument("--disks", action="store_true", help="list mounted volumes and exit")
    ap.add_argument("--fallback", action="store_true", help="skip indexed search")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    if args.disks:
        _print_disks(sys.stdout)
        return 0

    try:
        settings = ScanSettings.from_env(**({"force_fallback": True} if args.fallback else {}))
    except ValueError as e:
        ap.error(f"bad SPACESCOUT_* setting: {e}")

    scanner = Scanner(settings)

    def sink(event, payload):
        if event == PROGRESS_EVENT and sys.stderr.isatty():
            sys.stderr.write(f"\r\033[K{payload.current_path} [{payload.items_processed}]")
            sys.stderr.flush()

    try:
        tree = scanner.scan(args.path, sink)
    except KeyboardInterrupt:
        scanner.cancel()
        sys.stderr.write("\ncancelled\n")
        return 130
    except CancelledError as e:
        sys.stderr.write(f"\n{e}\n")
        return 130
    except ScanError as e:
        sys.stderr.write(f"\nspacescout: {e}\n")
        return 1
    finally:
        if sys.stderr.isatty():
            sys.stderr.write("\r\033[K")

    if args.json:
        json.dump(tree.to_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    _print_tree(tree, sys.stdout)
    disk = disk_for_path(tree.path)
    if disk is not None:
        sys.stdout.write(f"   volume {disk.mount_point}: {format_size(disk.free)} free "
                         f"of {format_size(disk.total)}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
