"""
Song Catalog CLI - Entry point

Parses the subcommand, sets up logging and storage, runs the access gate
when it is enabled, and dispatches to the catalog command handlers.
"""

import argparse
import sys
from typing import Callable, Dict, List, Optional

from loguru import logger

from song_catalog.commands import catalog as commands
from song_catalog.context import AppContext
from song_catalog.core import config as config_module
from song_catalog.core.console import get_console
from song_catalog.core.database import open_store
from song_catalog.core.output import log, setup_loguru
from song_catalog.domain.access import (
    AccessGate,
    AllowListAuthorizer,
    Authorizer,
    DocumentRoleAuthorizer,
    Identity,
    Session,
)
from song_catalog.domain.catalog import CatalogError, RecordStore
from song_catalog.domain.catalog.controller import CatalogController
from song_catalog.domain.cloud import FirestoreClient

Handler = Callable[[AppContext, argparse.Namespace], int]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="song-catalog",
        description="Song Catalog - manage available and placed songs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List songs")
    list_parser.add_argument("-q", "--query", help="Filter by title (case-insensitive)")
    list_parser.add_argument(
        "--status", choices=["available", "placed"], help="Only songs with this status"
    )
    list_parser.add_argument(
        "--sort",
        choices=["title", "created", "style"],
        help="Sort order (remembered for next time)",
    )

    show_parser = subparsers.add_parser("show", help="Show one song")
    show_parser.add_argument("song_id", help="Song id or unique id prefix")

    add_parser = subparsers.add_parser("add", help="Add a song")
    add_parser.add_argument(
        "assignments", nargs="*", help="field=value pairs, e.g. title='Luna' style=Pop"
    )

    edit_parser = subparsers.add_parser("edit", help="Edit a song")
    edit_parser.add_argument("song_id", help="Song id or unique id prefix")
    edit_parser.add_argument("assignments", nargs="*", help="field=value pairs")

    remove_parser = subparsers.add_parser("remove", help="Delete a song")
    remove_parser.add_argument("song_id", help="Song id or unique id prefix")
    remove_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    clear_parser = subparsers.add_parser("clear", help="Delete all songs (backup first)")
    clear_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    export_parser = subparsers.add_parser("export", help="Export to an .xlsx workbook")
    export_parser.add_argument("-o", "--output", help="Output file path")

    import_parser = subparsers.add_parser("import", help="Import an .xlsx workbook")
    import_parser.add_argument("path", help="Workbook to import")
    import_parser.add_argument(
        "--on-duplicate",
        choices=["ask", "skip", "overwrite", "cancel"],
        default="ask",
        help="What to do with titles that already exist (default: ask)",
    )

    backups_parser = subparsers.add_parser("backups", help="Manage backups")
    backups_sub = backups_parser.add_subparsers(dest="backups_command")
    backups_sub.add_parser("list", help="List backups")
    restore_parser = backups_sub.add_parser("restore", help="Restore a backup")
    restore_parser.add_argument("key", help="Backup key")
    restore_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")
    delete_parser = backups_sub.add_parser("delete", help="Delete a backup")
    delete_parser.add_argument("key", help="Backup key")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    play_parser = subparsers.add_parser("play", help="Play a song's audio preview")
    play_parser.add_argument("song_id", help="Song id or unique id prefix")

    cloud_parser = subparsers.add_parser("cloud", help="Sync with the cloud document store")
    cloud_sub = cloud_parser.add_subparsers(dest="cloud_command")
    cloud_sub.add_parser("push", help="Upload the local catalog")
    pull_parser = cloud_sub.add_parser("pull", help="Replace the local catalog")
    pull_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    return parser


HANDLERS: Dict[str, Handler] = {
    "list": commands.handle_list_command,
    "show": commands.handle_show_command,
    "add": commands.handle_add_command,
    "edit": commands.handle_edit_command,
    "remove": commands.handle_remove_command,
    "clear": commands.handle_clear_command,
    "export": commands.handle_export_command,
    "import": commands.handle_import_command,
    "play": commands.handle_play_command,
    "backups list": commands.handle_backups_list_command,
    "backups restore": commands.handle_backups_restore_command,
    "backups delete": commands.handle_backups_delete_command,
    "cloud push": commands.handle_cloud_push_command,
    "cloud pull": commands.handle_cloud_pull_command,
}


def resolve_handler(args: argparse.Namespace) -> Optional[Handler]:
    """Find the handler for the parsed subcommand (None if incomplete)."""
    name = args.subcommand
    if name == "backups":
        name = f"backups {args.backups_command or 'list'}"
    elif name == "cloud":
        if not args.cloud_command:
            return None
        name = f"cloud {args.cloud_command}"
    return HANDLERS.get(name)


def build_authorizer(cfg: config_module.Config) -> Authorizer:
    """Pick the configured authorization strategy."""
    if cfg.access.strategy == "allow_list":
        return AllowListAuthorizer(cfg.access.allowed_emails)

    cloud = cfg.cloud
    client = FirestoreClient(cloud.project_id, cloud.api_key, timeout=cloud.timeout_seconds)
    return DocumentRoleAuthorizer(client, collection=cfg.access.users_collection)


def open_session(cfg: config_module.Config) -> Optional[Session]:
    """Run the access gate when enabled.

    Raises:
        AccessDeniedError: If the configured identity is not authorized
    """
    if not cfg.access.enabled:
        return None

    def sign_out() -> None:
        logger.info(f"Signed out {cfg.access.email!r}")

    gate = AccessGate(build_authorizer(cfg), sign_out=sign_out)
    return gate.enter(Identity(email=cfg.access.email))


def run(argv: Optional[List[str]] = None) -> int:
    """Run one CLI invocation and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = resolve_handler(args) if args.subcommand else None
    if handler is None:
        parser.print_help()
        return 1

    cfg = config_module.load_config()
    config_module.ensure_directories()
    setup_loguru(config_module.get_log_file_path(cfg), level=cfg.logging.level)
    logger.info(f"Command: {' '.join(argv if argv is not None else sys.argv[1:])}")

    try:
        session = open_session(cfg)

        kv = open_store(config_module.get_database_path(cfg))
        store = RecordStore(kv, namespace=cfg.storage.namespace, sort_key=cfg.storage.sort_key)
        controller = CatalogController(store)

        ctx = AppContext.create(cfg, controller, get_console(), session=session)
        return handler(ctx, args)
    except CatalogError as e:
        log(f"❌ {e}", level="error")
        return 1
    except OSError as e:
        log(f"❌ {e}", level="error")
        return 1
    except KeyboardInterrupt:
        log("Interrupted", level="warning")
        return 1


def main() -> None:
    """Main entry point for the song-catalog command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
