"""
Tests for the CSV/XML export.
"""

import json
import os
import tempfile
import xml.etree.ElementTree as ET

from wheeldb.export import (
    CSV_HEADER,
    export_database,
    render_csv,
    render_xml,
    select_rows,
)


def make_game(
    romname: str = "outrun",
    rotation_degrees=270,
    title: str = "Out Run",
    manufacturer: str = "Sega",
    year: str = "1986",
    rotation_type: str = "mechanical_stop",
    confidence: str = "high",
) -> dict:
    """Helper to create a database entry."""
    game = {
        "title": title,
        "rotation_degrees": rotation_degrees,
        "rotation_type": rotation_type,
        "confidence": confidence,
        "sources": [{"type": "manual", "description": "Operator manual"}],
        "emulators": {"mame": {"romname": romname, "clones_inherit": True}},
    }
    if manufacturer is not None:
        game["manufacturer"] = manufacturer
    if year is not None:
        game["year"] = year
    return game


def make_database(**games) -> dict:
    """Helper to build a database document."""
    return {"version": "1.2.0", "generated": "2026-01-01T00:00:00Z", "games": games}


class TestSelectRows:
    """Tests for select_rows()."""

    def test_unknown_rotation_excluded(self):
        """Test null rotation entries are left out."""
        rows = select_rows(make_database(outrun=make_game(rotation_degrees=None)))
        assert rows == []

    def test_infinite_rotation_kept_verbatim(self):
        """Test -1 is exported as -1."""
        rows = select_rows(make_database(
            turbo=make_game("turbo", rotation_degrees=-1, rotation_type="optical_encoder"),
        ))
        assert rows[0].rotation_degrees == -1

    def test_entry_without_mame_excluded(self):
        """Test entries with no MAME mapping are left out."""
        game = make_game()
        game["emulators"] = {"teknoparrot": {"profile": "SR3"}}
        assert select_rows(make_database(sr3=game)) == []

    def test_missing_optional_fields_become_empty(self):
        """Test absent manufacturer and year are empty strings."""
        rows = select_rows(make_database(outrun=make_game(manufacturer=None, year=None)))
        assert rows[0].manufacturer == ""
        assert rows[0].year == ""

    def test_sorted_by_romname(self):
        """Test rows are ordered by ROM name, case-sensitive."""
        rows = select_rows(make_database(
            b=make_game("outrun"), a=make_game("zaxxon"), c=make_game("Hangon"),
        ))
        assert [r.romname for r in rows] == ["Hangon", "outrun", "zaxxon"]

    def test_invalid_rotation_skipped(self):
        """Test an unparseable rotation is skipped, not fatal."""
        rows = select_rows(make_database(
            bad=make_game("bad", rotation_degrees="lots"), outrun=make_game(),
        ))
        assert [r.romname for r in rows] == ["outrun"]


class TestRenderCsv:
    """Tests for render_csv()."""

    def test_minimal_database(self):
        """Test header plus one row for a single game."""
        doc = {"games": {"outrun": {"rotation_degrees": 270, "emulators": {"mame": {"romname": "outrun"}}}}}
        lines = render_csv(select_rows(doc)).splitlines()
        assert lines[0] == "romname,title,manufacturer,year,rotation_degrees,rotation_type,confidence"
        assert len(lines) == 2
        assert lines[1].startswith('"outrun",')
        assert ",270," in lines[1]

    def test_header_matches_constant(self):
        """Test the header row is the fixed column list."""
        assert render_csv([]) == ",".join(CSV_HEADER) + "\n"

    def test_quotes_are_doubled(self):
        """Test embedded quotes are escaped by doubling."""
        rows = select_rows(make_database(outrun=make_game(title='Out Run "Deluxe"')))
        assert '"Out Run ""Deluxe"""' in render_csv(rows)

    def test_infinite_rotation_literal(self):
        """Test -1 appears literally."""
        rows = select_rows(make_database(turbo=make_game("turbo", rotation_degrees=-1)))
        assert ',-1,' in render_csv(rows)


class TestRenderXml:
    """Tests for render_xml()."""

    def test_document_attributes_and_records(self):
        """Test root attributes and one element per game."""
        rows = select_rows(make_database(
            outrun=make_game(), turbo=make_game("turbo", rotation_degrees=-1),
        ))
        root = ET.fromstring(render_xml(rows, "1.2.0", "2026-01-01T00:00:00Z"))
        assert root.get("version") == "1.2.0"
        assert root.get("generated") == "2026-01-01T00:00:00Z"
        assert root.get("gameCount") == "2"
        games = list(root)
        assert [g.get("romname") for g in games] == ["outrun", "turbo"]
        assert games[0].get("rotation") == "270"
        assert games[1].get("rotation") == "-1"
        assert games[0].get("type") == "mechanical_stop"
        assert games[0].get("confidence") == "high"

    def test_unknown_rotation_absent(self):
        """Test null rotation entries don't appear."""
        rows = select_rows(make_database(outrun=make_game(rotation_degrees=None)))
        root = ET.fromstring(render_xml(rows, "1.2.0", "x"))
        assert root.get("gameCount") == "0"
        assert list(root) == []


class TestExportDatabase:
    """Tests for export_database()."""

    def test_writes_all_formats_deterministically(self):
        """Test two exports of the same database are byte-identical."""
        doc = make_database(outrun=make_game(), turbo=make_game("turbo", rotation_degrees=-1))
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = os.path.join(tmpdir, "db.json")
            with open(db_path, "w", encoding="utf-8") as f:
                json.dump(doc, f)

            outputs = []
            for run in ("one", "two"):
                dist = os.path.join(tmpdir, run)
                os.makedirs(dist)
                paths = export_database(doc, db_path, dist)
                outputs.append({fmt: p.read_bytes() for fmt, p in paths.items()})

            assert outputs[0] == outputs[1]
            with open(db_path, "rb") as f:
                assert outputs[0]["json"] == f.read()
