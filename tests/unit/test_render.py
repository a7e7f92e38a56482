"""Unit tests for report rendering."""

from __future__ import annotations

import io
import json

from rich.console import Console

from cargo_sponsor.pipeline import SponsorRecord
from cargo_sponsor.report import build_sponsor_table, render_json, render_table
from cargo_sponsor.report.render import NO_RESULTS_MESSAGE

_RECORDS = [
    SponsorRecord(
        package_name="serde",
        repository_url="https://github.com/serde-rs/serde",
        sponsor_links=[
            "https://github.com/sponsors/dtolnay",
            "https://opencollective.com/serde",
        ],
        sponsor_count=123,
    ),
    SponsorRecord(
        package_name="tiny",
        repository_url="https://github.com/someone/tiny",
        sponsor_links=["https://ko-fi.com/someone"],
    ),
]


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=120, color_system=None), buffer


class TestRenderJson:
    """Tests for render_json."""

    def test_uses_external_field_names(self) -> None:
        """Each record serialises with the documented keys."""
        payload = json.loads(render_json(_RECORDS))

        assert payload == [
            {
                "name": "serde",
                "repository": "https://github.com/serde-rs/serde",
                "sponsor_links": [
                    "https://github.com/sponsors/dtolnay",
                    "https://opencollective.com/serde",
                ],
                "sponsor_count": 123,
            },
            {
                "name": "tiny",
                "repository": "https://github.com/someone/tiny",
                "sponsor_links": ["https://ko-fi.com/someone"],
                "sponsor_count": None,
            },
        ]

    def test_is_pretty_printed(self) -> None:
        """Output is indented for reading."""
        rendered = render_json(_RECORDS[:1])

        assert rendered.startswith("[\n  {"), "Expected two-space indentation"

    def test_empty_list(self) -> None:
        """No records render as an empty array."""
        assert json.loads(render_json([])) == []


class TestRenderTable:
    """Tests for the rich table output."""

    def test_table_has_one_row_per_record(self) -> None:
        """Rows list package, sponsor count and the first link."""
        table = build_sponsor_table(_RECORDS)

        assert [column.header for column in table.columns] == [
            "Package",
            "Sponsors",
            "Link",
        ]
        assert table.row_count == 2
        assert list(table.columns[1].cells) == ["123", "-"]
        assert [cell.plain for cell in table.columns[2].cells] == [
            "https://github.com/sponsors/dtolnay",
            "https://ko-fi.com/someone",
        ]

    def test_render_table_prints_heading_and_rows(self) -> None:
        """The report names how many projects were found."""
        console, buffer = _console()

        render_table(_RECORDS, console)

        output = buffer.getvalue()
        assert "Sponsorable Dependencies" in output
        assert "Found 2 projects you can support:" in output
        assert "serde" in output
        assert "https://ko-fi.com/someone" in output
        assert "https://opencollective.com/serde" not in output, (
            "Only the first link is shown"
        )

    def test_render_table_without_records(self) -> None:
        """An empty report prints a single message."""
        console, buffer = _console()

        render_table([], console)

        assert buffer.getvalue().strip() == NO_RESULTS_MESSAGE

    def test_links_are_not_parsed_as_markup(self) -> None:
        """Square brackets in names and links are printed literally."""
        record = SponsorRecord(
            package_name="odd[bold]name",
            repository_url="https://github.com/o/odd",
            sponsor_links=["https://example.test/fund?tier=[gold]"],
        )
        console, buffer = _console()

        render_table([record], console)

        output = buffer.getvalue()
        assert "odd[bold]name" in output
        assert "https://example.test/fund?tier=[gold]" in output
