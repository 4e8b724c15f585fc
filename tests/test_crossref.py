"""
Tests for the database cross-reference index.
"""

from wheeldb.crossref import MAME, TEKNOPARROT, build_index, clone_inheriting_keys


def make_database(**games) -> dict:
    """Helper to build a database document."""
    return {"version": "1.0.0", "generated": "2026-01-01T00:00:00Z", "games": games}


class TestBuildIndex:
    """Tests for build_index()."""

    def test_maps_romname_to_key(self):
        """Test a ROM name resolves to its database key."""
        doc = make_database(outrun={"emulators": {"mame": {"romname": "outrun"}}})
        index = build_index(doc, MAME)
        assert index.lookup("outrun") == "outrun"

    def test_key_can_differ_from_romname(self):
        """Test slug keys resolve from the ROM name."""
        doc = make_database(**{"out-run": {"emulators": {"mame": {"romname": "outrun"}}}})
        assert build_index(doc, MAME).lookup("outrun") == "out-run"

    def test_unknown_romname_maps_to_nothing(self):
        """Test an unmapped ROM name gives None."""
        doc = make_database(outrun={"emulators": {"mame": {"romname": "outrun"}}})
        index = build_index(doc, MAME)
        assert index.lookup("hangon") is None
        assert "hangon" not in index

    def test_platforms_are_separate(self):
        """Test each platform only sees its own mappings."""
        doc = make_database(
            outrun={"emulators": {"mame": {"romname": "outrun"}}},
            srally={"emulators": {"teknoparrot": {"profile": "SegaRally3"}}},
        )
        assert len(build_index(doc, MAME)) == 1
        assert build_index(doc, TEKNOPARROT).lookup("SegaRally3") == "srally"
        assert build_index(doc, MAME).lookup("SegaRally3") is None

    def test_profile_extension_is_ignored(self):
        """Test 'Foo.xml' and 'Foo' resolve alike."""
        doc = make_database(srally={"emulators": {"teknoparrot": {"profile": "SegaRally3.xml"}}})
        assert build_index(doc, TEKNOPARROT).lookup("SegaRally3") == "srally"

    def test_duplicates_last_key_wins_and_recorded(self):
        """Test a duplicate mapping resolves to the later key and is reported."""
        doc = make_database(
            outrun_b={"emulators": {"mame": {"romname": "outrun"}}},
            outrun_a={"emulators": {"mame": {"romname": "outrun"}}},
        )
        index = build_index(doc, MAME)
        assert index.lookup("outrun") == "outrun_b"
        assert index.duplicates == [("outrun", "outrun_a", "outrun_b")]

    def test_no_database_is_unavailable(self):
        """Test a missing database gives an empty, unavailable index."""
        index = build_index(None, MAME)
        assert not index.available
        assert index.lookup("outrun") is None


class TestCloneInheritingKeys:
    """Tests for clone_inheriting_keys()."""

    def test_only_inheriting_entries(self):
        """Test only entries with clones_inherit are included."""
        doc = make_database(
            outrun={"emulators": {"mame": {"romname": "outrun", "clones_inherit": True}}},
            hangon={"emulators": {"mame": {"romname": "hangon", "clones_inherit": False}}},
        )
        assert clone_inheriting_keys(doc) == {"outrun": "outrun"}

    def test_none_database(self):
        """Test no database gives no parents."""
        assert clone_inheriting_keys(None) == {}
