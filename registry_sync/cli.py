"""Command-line interface for registry-sync.

Usage:
    registry-sync import exports/registry.csv
    registry-sync import exports/partial.csv --additive
    registry-sync summary
    registry-sync register 12345-6789012-3 "Jane Doe" --password secret
    registry-sync reset
"""

import argparse
import logging
import sys
from pathlib import Path

from registry_sync.config import RegistryConfig
from registry_sync.exceptions import FormatError, IdentityAlreadyClaimedError, PersistenceWriteError
from registry_sync.logging import setup_logging
from registry_sync.service import RegistryService
from registry_sync.store.reconcile import ImportMode

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="registry-sync",
        description="Import registry exports and keep the local and remote registry in sync",
    )
    parser.add_argument("--data-dir", type=Path, default=None, help="Local store directory")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument(
        "--no-remote-refresh",
        action="store_true",
        help="Do not refresh from the remote mirror at startup",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Import an export file")
    p_import.add_argument("file", type=Path)
    p_import.add_argument(
        "--additive",
        action="store_true",
        help="Merge into the registry instead of replacing it",
    )

    sub.add_parser("summary", help="Print registry counts and totals")
    sub.add_parser("reset", help="Purge the local store and reload")

    p_register = sub.add_parser("register", help="Register or claim a member login")
    p_register.add_argument("identity_number")
    p_register.add_argument("name")
    p_register.add_argument("--password", required=True)
    p_register.add_argument("--email", default=None)
    p_register.add_argument("--phone", default="-")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = RegistryConfig.from_env()
    if args.data_dir is not None:
        config.local.data_dir = args.data_dir
    if args.log_level:
        config.log_level = args.log_level
    if args.json_logs:
        config.log_format = "json"

    setup_logging(config.log_level, config.log_format)

    service = RegistryService(config)
    try:
        service.boot(refresh_remote=not args.no_remote_refresh)
        # Commands operate on the refreshed registry
        service.wait_for_remote()

        if args.command == "import":
            mode = ImportMode.ADDITIVE if args.additive else None
            report = service.import_file(args.file, mode)
            print(report.message)
            print(f"  members: {report.members_registered}")
            print(f"  rows processed: {report.rows_processed}")
            print(f"  rows skipped: {report.rows_skipped}")
        elif args.command == "summary":
            for key, value in service.summary().items():
                print(f"  {key}: {value}")
        elif args.command == "reset":
            service.reset()
            service.wait_for_remote()
            print("Local registry purged and reloaded")
        elif args.command == "register":
            member, claimed = service.register_member(
                args.identity_number,
                args.name,
                args.password,
                email=args.email,
                phone=args.phone,
            )
            verb = "Claimed" if claimed else "Registered"
            print(f"{verb} {member.member_id} ({member.name})")

        if not service.wait_for_remote(timeout=30):
            logger.warning("Remote mirror still syncing at exit")
        elif service.coordinator.last_remote_error is not None:
            logger.warning("Remote mirror not updated: %s", service.coordinator.last_remote_error)
    except FormatError as e:
        print(f"Format error: {e}", file=sys.stderr)
        return 2
    except (IdentityAlreadyClaimedError, PersistenceWriteError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        service.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
