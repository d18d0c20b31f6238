"""
Notes Client — Command-Line Front End
=======================================

What:  `notes` command: list, add, edit, delete notes and list tags.
How:   Each command builds one NotesApiClient and one NotesStore, drives the
       presentation components and prints what they render.
Who:   Installed as the `notes` console script.

Examples:
    notes list --search groceries --tag home
    notes add --title "Plan" --content "# Monday" --tag work --tag weekly
    notes edit 3f2c... --tag work
    notes delete 3f2c... --yes
    notes tags

Exit status is 0 on success and 1 when the server rejected the request or
could not be reached.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from notes_app.client.api import ApiError, NotesApiClient
from notes_app.client.components import NoteCard, NotesPage, render_error_banner
from notes_app.client.models import Note
from notes_app.client.store import NotesStore
from notes_app.config import ClientSettings
from notes_app.log import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notes", description="Personal notes from the terminal")
    parser.add_argument("--api-url", help="API base URL (default: NOTES_API_BASE_URL or http://localhost:3000)")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Show notes, newest first")
    list_cmd.add_argument("--search", default="", help="Free-text filter")
    list_cmd.add_argument("--tag", default=None, help="Only notes carrying this tag")
    list_cmd.add_argument("--raw", action="store_true", help="Show content without rendering markup")

    add_cmd = sub.add_parser("add", help="Create a note")
    add_cmd.add_argument("--title", required=True)
    add_cmd.add_argument("--content", required=True)
    add_cmd.add_argument("--tag", dest="tags", action="append", default=[])

    edit_cmd = sub.add_parser("edit", help="Update a note")
    edit_cmd.add_argument("note_id", help="Note id (a unique prefix is enough)")
    edit_cmd.add_argument("--title")
    edit_cmd.add_argument("--content")
    edit_cmd.add_argument("--tag", dest="tags", action="append", default=None,
                          help="Replace the tags; repeat for several")

    delete_cmd = sub.add_parser("delete", help="Delete a note")
    delete_cmd.add_argument("note_id", help="Note id (a unique prefix is enough)")
    delete_cmd.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    sub.add_parser("tags", help="List all tags")
    sub.add_parser("health", help="Check that the API is reachable")
    return parser


def find_note(notes: List[Note], note_id: str) -> Optional[Note]:
    """Exact id match, else the single note whose id starts with `note_id`."""
    for note in notes:
        if note.id == note_id:
            return note
    matches = [note for note in notes if note.id.startswith(note_id)]
    return matches[0] if len(matches) == 1 else None


async def _loaded_store(api: NotesApiClient) -> Optional[NotesStore]:
    store = NotesStore(api)
    await store.load()
    if store.error:
        print(render_error_banner(store.error, can_retry=False), file=sys.stderr)
        return None
    return store


async def cmd_list(api: NotesApiClient, args: argparse.Namespace) -> int:
    store = await _loaded_store(api)
    if store is None:
        return 1
    page = NotesPage(store)
    page.search.search_term = args.search
    page.search.selected_tag = args.tag
    if args.raw:
        for note in store.notes:
            page.card_for(note).show_markup = False
    print(page.render())
    return 0


async def cmd_add(api: NotesApiClient, args: argparse.Namespace) -> int:
    store = NotesStore(api)
    page = NotesPage(store)
    form = page.form
    form.open()
    form.title = args.title
    form.content = args.content
    for tag in args.tags:
        form.add_tag(tag)
    if not await form.submit():
        print(f"error: {form.error}", file=sys.stderr)
        return 1
    print(page.card_for(store.notes[0]).render())
    return 0


async def cmd_edit(api: NotesApiClient, args: argparse.Namespace) -> int:
    store = await _loaded_store(api)
    if store is None:
        return 1
    note = find_note(store.notes, args.note_id)
    if note is None:
        print(f"error: no note matches '{args.note_id}'", file=sys.stderr)
        return 1

    page = NotesPage(store)
    form = page.form
    page.start_edit(note)
    if args.title is not None:
        form.title = args.title
    if args.content is not None:
        form.content = args.content
    if args.tags is not None:
        form.tags = []
        for tag in args.tags:
            form.add_tag(tag)
    if not await form.submit():
        print(f"error: {form.error}", file=sys.stderr)
        return 1

    updated = find_note(store.notes, note.id)
    print(page.card_for(updated).render())
    return 0


async def cmd_delete(api: NotesApiClient, args: argparse.Namespace) -> int:
    store = await _loaded_store(api)
    if store is None:
        return 1
    note = find_note(store.notes, args.note_id)
    if note is None:
        print(f"error: no note matches '{args.note_id}'", file=sys.stderr)
        return 1

    card = NoteCard(note, on_delete=store.delete_note, on_edit=lambda _: None)
    card.request_delete()
    if not args.yes:
        answer = input(f"Delete “{note.title}”? This cannot be undone. [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            card.cancel_delete()
            print("Cancelled.")
            return 0
    if not await card.confirm_delete():
        print(f"error: {store.error}", file=sys.stderr)
        return 1
    print(f"Deleted “{note.title}”.")
    return 0


async def cmd_tags(api: NotesApiClient, args: argparse.Namespace) -> int:
    store = await _loaded_store(api)
    if store is None:
        return 1
    for tag in store.tags:
        print(tag)
    return 0


async def cmd_health(api: NotesApiClient, args: argparse.Namespace) -> int:
    try:
        result = await api.health_check()
    except ApiError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    print(result.get("message", "ok"))
    return 0


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "tags": cmd_tags,
    "health": cmd_health,
}


async def run(args: argparse.Namespace, client_settings: ClientSettings) -> int:
    if args.api_url:
        client_settings = client_settings.model_copy(update={"api_base_url": args.api_url})
    async with NotesApiClient.from_settings(client_settings) as api:
        return await COMMANDS[args.command](api, args)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    client_settings = ClientSettings()
    setup_logging(client_settings.log_level, stream=sys.stderr)
    return asyncio.run(run(args, client_settings))


if __name__ == "__main__":
    sys.exit(main())
