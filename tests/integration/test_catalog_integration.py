"""Integration tests for normalizing catalog rows end to end."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from pubvalues.cli.main import cli
from pubvalues.dates import IsoDay, IsoDuration
from pubvalues.identifiers import Doi, Isbn, Issn, PublicationIdentifier
from pubvalues.serialize import dumps, record_from_dict
from pubvalues.vocab import Rights

RAW_ROWS: list[dict[str, Any]] = [
    {
        "title": "Signal Processing",
        "identifiers": "ISBN 978-0-306-40615-7; 10.1000/182",
        "published": "May 6, 2020",
        "rights": "Copyright",
        "length": "pt1h30m",
    },
    {
        "title": "Hearing Research",
        "identifiers": "0378-5955",
        "published": "D:20190301",
        "rights": None,
        "length": None,
    },
]


@dataclass
class CatalogEntry:
    """Normalized catalog row."""

    title: str
    identifiers: list[PublicationIdentifier] = field(default_factory=list)
    published: IsoDay | None = None
    rights: Rights | None = None
    length: IsoDuration | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _normalize(row: dict[str, Any]) -> CatalogEntry:
    """Build a catalog entry from loosely formatted input."""
    return CatalogEntry(
        title=row["title"],
        identifiers=PublicationIdentifier.objects(row["identifiers"], invalid=False),
        published=IsoDay.create(row["published"]),
        rights=Rights.create(row["rights"]),
        length=IsoDuration.create(row["length"]),
    )


def _write_jsonl(path: Path, entries: list[CatalogEntry]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for entry in entries:
            f.write(dumps(entry) + "\n")


def _read_jsonl(path: Path) -> list[CatalogEntry]:
    with path.open(encoding="utf-8") as f:
        return [record_from_dict(CatalogEntry, json.loads(line)) for line in f if line.strip()]


# ---------------------------------------------------------------------------
# Record pipeline
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_rows_are_normalized() -> None:
    """Test loosely formatted rows come out in canonical form."""
    first, second = (_normalize(row) for row in RAW_ROWS)

    assert [str(i) for i in first.identifiers] == ["isbn:9780306406157", "doi:10.1000/182"]
    assert str(first.published) == "2020-05-06"
    assert str(first.rights) == "copyright"
    assert str(first.length) == "PT1H30M"

    assert [str(i) for i in second.identifiers] == ["issn:03785955"]
    assert str(second.published) == "2019-03-01"
    assert second.rights is None
    assert second.length is None


@pytest.mark.integration
def test_jsonl_round_trip(tmp_path: Path) -> None:
    """Test entries written as JSON lines are restored with their value types."""
    entries = [_normalize(row) for row in RAW_ROWS]
    path = tmp_path / "catalog.jsonl"

    _write_jsonl(path, entries)
    stored = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    restored = _read_jsonl(path)

    assert stored[0]["identifiers"] == ["isbn:9780306406157", "doi:10.1000/182"]
    assert stored[1]["rights"] is None
    assert restored == entries
    assert isinstance(restored[0].identifiers[0], Isbn)
    assert isinstance(restored[0].identifiers[1], Doi)
    assert isinstance(restored[1].identifiers[0], Issn)
    assert isinstance(restored[0].published, IsoDay)
    assert isinstance(restored[0].rights, Rights)
    assert isinstance(restored[0].length, IsoDuration)


# ---------------------------------------------------------------------------
# CLI agreement
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_cli_identify_matches_library() -> None:
    """Test the identify command reports the same identifiers as the library."""
    raw = [row["identifiers"] for row in RAW_ROWS]
    expected = [str(i) for row in RAW_ROWS for i in _normalize(row).identifiers]

    result = CliRunner().invoke(cli, ["identify", *raw, "--json"])

    assert result.exit_code == 0
    reported = json.loads(result.output)
    assert [item["identifier"] for item in reported] == expected
    assert all(item["valid"] for item in reported)
