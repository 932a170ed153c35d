"""
Catalog command handlers for Song Catalog CLI.

Handles: list, show, add, edit, remove, clear, export, import, backups,
play, cloud push/pull.

Each handler takes the AppContext and the parsed argparse namespace and
returns a process exit code.
"""

import argparse
import time
from pathlib import Path
from typing import List

from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from song_catalog.context import AppContext
from song_catalog.core.output import log
from song_catalog.domain.catalog import (
    DERIVED_FIELDS,
    NUMERIC_FIELDS,
    ImportPolicy,
    Song,
    SortKey,
    Status,
)
from song_catalog.domain.catalog.controller import ImportOutcome
from song_catalog.domain.cloud import CloudCatalogSync, FirestoreClient
from song_catalog.domain.playback import AudioPreview, check_mpv_available
from song_catalog.domain.spreadsheet import default_export_filename
from song_catalog.domain.spreadsheet.columns import AVAILABLE_COLUMNS, PLACED_COLUMNS
from song_catalog.utils.formatting import (
    format_bool,
    format_currency,
    format_percentage,
    format_text,
)
from song_catalog.utils.parsers import apply_assignments

PERCENTAGE_FIELDS = frozenset({"authorship_percentage", "master_royalty_percentage"})

STATUS_STYLES = {
    Status.AVAILABLE: "status.available",
    Status.PLACED: "status.placed",
}


def _confirm(args: argparse.Namespace, question: str) -> bool:
    if getattr(args, "yes", False):
        return True
    return Confirm.ask(question, default=False)


def _display_value(song: Song, field_name: str) -> str:
    """Field value as escaped rich markup."""
    value = getattr(song, field_name)
    if field_name == "status":
        return value.label
    if field_name == "registered":
        return format_bool(value)
    if field_name in PERCENTAGE_FIELDS:
        return format_percentage(value)
    if field_name in NUMERIC_FIELDS:
        return format_currency(value)
    return escape(format_text(value))


def _songs_table(songs: List[Song], title: str) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Status")
    table.add_column("Style")
    table.add_column("Artist / Client")
    table.add_column("Created")
    table.add_column("Total (€)", justify="right")

    for song in songs:
        if song.status is Status.PLACED:
            who = song.artist
            total = song.total_authorship_revenue
        else:
            who = song.target_client
            total = None
        table.add_row(
            escape(song.id),
            escape(song.title),
            f"[{STATUS_STYLES[song.status]}]{song.status.label}[/]",
            escape(format_text(song.style)),
            escape(format_text(who)),
            escape(format_text(song.created_on)),
            format_currency(total),
        )
    return table


def handle_list_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """List songs, optionally filtered by title and status."""
    controller = ctx.controller

    sort_by = None
    if args.sort:
        sort_by = SortKey(args.sort)
        controller.store.save_sort_preference(sort_by)

    status = Status.parse(args.status) if args.status else None
    songs = controller.browse(query=args.query or "", sort_by=sort_by, status=status)

    counts = controller.counts()
    title = (
        f"Catalog: {counts.total} songs "
        f"({counts.available} available, {counts.placed} placed)"
    )
    if not songs:
        ctx.console.print(title)
        ctx.console.print("No songs match.", style="muted")
        return 0

    ctx.console.print(_songs_table(songs, title))
    return 0


def handle_show_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Show every field of one song, labelled as in its spreadsheet sheet."""
    song = ctx.controller.find(args.song_id)
    columns = PLACED_COLUMNS if song.status is Status.PLACED else AVAILABLE_COLUMNS

    table = Table(title=f"{escape(song.title)} [dim]({escape(song.id)})[/]", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for header, field_name in columns:
        table.add_row(header, _display_value(song, field_name))

    ctx.console.print(table)
    return 0


def handle_add_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Create a song from ``field=value`` assignments."""
    draft = apply_assignments(ctx.controller.create(), args.assignments)
    song = ctx.controller.save(draft)
    log(f"✓ Added {song.title!r} ({song.id})", level="success")
    return 0


def handle_edit_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Apply ``field=value`` assignments to an existing song."""
    song = ctx.controller.find(args.song_id)
    if not args.assignments:
        log("Nothing to change. Use field=value, e.g. artist=Rosalía", level="warning")
        return 1

    edited = apply_assignments(song, args.assignments)
    saved = ctx.controller.save(edited)

    for field_name in sorted(DERIVED_FIELDS):
        before, after = getattr(song, field_name), getattr(saved, field_name)
        if before != after:
            log(f"  {field_name}: {format_currency(before)} → {format_currency(after)}")

    log(f"✓ Saved {saved.title!r}", level="success")
    return 0


def handle_remove_command(ctx: AppContext, args: argparse.Namespace) -> int:
    song = ctx.controller.find(args.song_id)
    if not _confirm(args, f"Delete {song.title!r}?"):
        log("Cancelled")
        return 0

    ctx.controller.remove(song.id)
    log(f"✓ Deleted {song.title!r}", level="success")
    return 0


def handle_clear_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Empty the catalog after backing it up."""
    count = len(ctx.controller.songs)
    if not _confirm(args, f"Delete all {count} songs? A backup is made first."):
        log("Cancelled")
        return 0

    backup_key = ctx.controller.clear_all()
    if backup_key:
        log(f"✓ Catalog cleared. Backup saved as {backup_key}", level="success")
    else:
        log("Catalog was already empty")
    return 0


def handle_export_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Write the catalog to a two-sheet workbook."""
    if args.output:
        output_path = Path(args.output).expanduser()
    else:
        output_dir = Path(ctx.config.export.output_dir or Path.cwd())
        output_path = output_dir / default_export_filename(ctx.config.export.filename_prefix)

    written = ctx.controller.export_workbook(output_path)
    counts = ctx.controller.counts()
    log(
        f"✓ Exported {counts.available} available and {counts.placed} placed songs to {written}",
        level="success",
    )
    return 0


def _report_import(outcome: ImportOutcome) -> None:
    parts = [f"{outcome.added} added"]
    if outcome.overwritten:
        parts.append(f"{outcome.overwritten} overwritten")
    if outcome.skipped:
        parts.append(f"{outcome.skipped} skipped")
    log(f"✓ Import finished: {', '.join(parts)}", level="success")


def handle_import_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Import a workbook, asking how to treat titles that already exist."""
    controller = ctx.controller
    outcome = controller.import_workbook(Path(args.path).expanduser())

    if outcome.applied:
        if outcome.added:
            _report_import(outcome)
        else:
            log("The workbook contains no songs", level="warning")
        return 0

    preview = outcome.preview
    log(
        f"{len(preview.duplicate_titles)} of {len(preview.incoming)} imported titles "
        f"already exist:",
        level="warning",
    )
    for title in sorted(preview.duplicate_titles, key=str.casefold):
        ctx.console.print(f"  • {escape(title)}")

    choice = args.on_duplicate
    if choice == "ask":
        choice = Prompt.ask(
            "Skip duplicates, overwrite them, or cancel?",
            choices=["skip", "overwrite", "cancel"],
            default="skip",
        )

    if choice == "cancel":
        controller.cancel_import()
        log("Import cancelled, nothing was added")
        return 0

    _report_import(controller.resolve_import(ImportPolicy(choice)))
    return 0


def handle_backups_list_command(ctx: AppContext, args: argparse.Namespace) -> int:
    backups = ctx.controller.list_backups()
    if not backups:
        ctx.console.print("No backups yet.", style="muted")
        return 0

    table = Table(title="Backups")
    table.add_column("Key", style="cyan")
    table.add_column("Created")
    table.add_column("Songs", justify="right")
    for backup in backups:
        table.add_row(escape(backup.key), backup.created_at, str(len(backup.songs)))
    ctx.console.print(table)
    return 0


def handle_backups_restore_command(ctx: AppContext, args: argparse.Namespace) -> int:
    question = f"Replace the current {len(ctx.controller.songs)} songs with {args.key}?"
    if not _confirm(args, question):
        log("Cancelled")
        return 0

    songs = ctx.controller.restore_backup(args.key)
    log(f"✓ Restored {len(songs)} songs from {args.key}", level="success")
    return 0


def handle_backups_delete_command(ctx: AppContext, args: argparse.Namespace) -> int:
    if not _confirm(args, f"Delete backup {args.key}?"):
        log("Cancelled")
        return 0

    ctx.controller.delete_backup(args.key)
    log(f"✓ Deleted backup {args.key}", level="success")
    return 0


def handle_play_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Play a song's preview (demo for available songs, master for placed ones)."""
    song = ctx.controller.find(args.song_id)
    if not song.audio_link:
        log(f"{song.title!r} has no audio link", level="warning")
        return 1
    if not check_mpv_available():
        log("mpv is not installed; it is needed to play previews", level="error")
        return 1

    preview = AudioPreview(song.id, song.audio_link, ctx.backend, ctx.coordinator)
    if not preview.play():
        log("Could not start playback", level="error")
        return 1

    log(f"▶ Playing {song.title!r} (Ctrl+C to stop)")
    try:
        while preview.is_playing:
            time.sleep(0.5)
            if ctx.backend.is_finished():
                preview.ended()
    except KeyboardInterrupt:
        preview.pause()
    finally:
        ctx.backend.stop()
    return 0


def _cloud_sync(ctx: AppContext) -> CloudCatalogSync:
    cloud = ctx.config.cloud
    client = FirestoreClient(cloud.project_id, cloud.api_key, timeout=cloud.timeout_seconds)
    return CloudCatalogSync(client, collection=cloud.collection, document_id=cloud.document_id)


def handle_cloud_push_command(ctx: AppContext, args: argparse.Namespace) -> int:
    songs = ctx.controller.songs
    _cloud_sync(ctx).push(songs)
    log(f"✓ Pushed {len(songs)} songs to the cloud", level="success")
    return 0


def handle_cloud_pull_command(ctx: AppContext, args: argparse.Namespace) -> int:
    """Replace the local catalog with the cloud copy, backing up the local one."""
    songs = _cloud_sync(ctx).pull()
    if songs is None:
        log("Nothing stored in the cloud yet", level="warning")
        return 1

    current = ctx.controller.songs
    if not _confirm(args, f"Replace the local {len(current)} songs with {len(songs)} from the cloud?"):
        log("Cancelled")
        return 0

    if current:
        backup_key = ctx.controller.store.snapshot_backup(current)
        log(f"Local catalog backed up as {backup_key}")
    ctx.controller.replace_all(songs)
    log(f"✓ Pulled {len(songs)} songs from the cloud", level="success")
    return 0
