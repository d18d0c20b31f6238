"""
Notes — CLI Tests
===================

What:  Tests for the `notes` command against the in-memory FakeNotesApi,
       plus one run through a real NotesApiClient on httpx.MockTransport.
"""

import httpx
import pytest

from notes_app.client.api import ApiConnectionError, NotesApiClient
from notes_app.client.cli import (
    build_parser,
    cmd_add,
    cmd_delete,
    cmd_edit,
    cmd_health,
    cmd_list,
    cmd_tags,
    find_note,
)


def parse(*argv):
    return build_parser().parse_args(list(argv))


class TestParserAndLookup:

    def test_add_collects_repeated_tags(self):
        args = parse("add", "--title", "A", "--content", "B", "--tag", "x", "--tag", "y")
        assert args.tags == ["x", "y"]

    def test_edit_without_tags_leaves_them_alone(self):
        assert parse("edit", "abc", "--title", "New").tags is None

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            parse()

    def test_find_note_by_exact_id_or_unique_prefix(self, make_note):
        notes = [make_note(note_id="abc-1"), make_note(note_id="abd-2")]

        assert find_note(notes, "abd-2").id == "abd-2"
        assert find_note(notes, "abc").id == "abc-1"
        assert find_note(notes, "ab") is None
        assert find_note(notes, "zzz") is None


class TestCommands:

    @pytest.mark.asyncio
    async def test_list_renders_filtered_page(self, fake_api, capsys):
        code = await cmd_list(fake_api, parse("list", "--tag", "work"))

        out = capsys.readouterr().out
        assert code == 0
        assert "■ Standup" in out
        assert "■ Groceries" not in out
        assert "YESTERDAY" in out

    @pytest.mark.asyncio
    async def test_list_raw_shows_original_content(self, fake_api, capsys):
        await cmd_list(fake_api, parse("list", "--raw"))
        assert "# Yesterday" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_list_reports_load_failure(self, fake_api, capsys):
        fake_api.fail_with["get_all_notes"] = ApiConnectionError()

        code = await cmd_list(fake_api, parse("list"))

        assert code == 1
        assert "Unable to connect to server" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_add_prints_new_card(self, fake_api, capsys):
        code = await cmd_add(fake_api, parse("add", "--title", "Plan", "--content", "Steps", "--tag", "work"))

        assert code == 0
        assert "■ Plan" in capsys.readouterr().out
        assert fake_api.notes[-1].tags == ["work"]

    @pytest.mark.asyncio
    async def test_add_with_blank_title_fails_locally(self, fake_api, capsys):
        code = await cmd_add(fake_api, parse("add", "--title", " ", "--content", "Steps"))

        assert code == 1
        assert "Title and content are required" in capsys.readouterr().err
        assert "create_note" not in fake_api.calls

    @pytest.mark.asyncio
    async def test_edit_replaces_tags_only(self, fake_api, capsys):
        code = await cmd_edit(fake_api, parse("edit", "n-1", "--tag", "errands"))

        assert code == 0
        edited = next(n for n in fake_api.notes if n.id == "n-1")
        assert (edited.title, edited.tags) == ("Groceries", ["errands"])
        assert "#errands" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_edit_unknown_note(self, fake_api, capsys):
        code = await cmd_edit(fake_api, parse("edit", "missing", "--title", "X"))

        assert code == 1
        assert "no note matches 'missing'" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_delete_with_yes_skips_prompt(self, fake_api, capsys):
        code = await cmd_delete(fake_api, parse("delete", "n-2", "--yes"))

        assert code == 0
        assert [n.id for n in fake_api.notes] == ["n-1"]
        assert "Deleted “Standup”." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_delete_declined_at_prompt(self, fake_api, capsys, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt: "n")

        code = await cmd_delete(fake_api, parse("delete", "n-2"))

        assert code == 0
        assert len(fake_api.notes) == 2
        assert "Cancelled." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_tags_prints_one_per_line(self, fake_api, capsys):
        code = await cmd_tags(fake_api, parse("tags"))

        assert code == 0
        assert capsys.readouterr().out.splitlines() == ["home", "shopping", "work"]


class TestAgainstHttpClient:

    @pytest.mark.asyncio
    async def test_health_prints_server_message(self, capsys):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"message": "Notes API Server is running"})
        )
        async with NotesApiClient("http://notes.test", transport=transport) as api:
            code = await cmd_health(api, parse("health"))

        assert code == 0
        assert capsys.readouterr().out.strip() == "Notes API Server is running"

    @pytest.mark.asyncio
    async def test_health_reports_unreachable_server(self, capsys):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with NotesApiClient(
            "http://notes.test", transport=httpx.MockTransport(handler), retry_attempts=1
        ) as api:
            code = await cmd_health(api, parse("health"))

        assert code == 1
        assert "Unable to connect to server" in capsys.readouterr().err
