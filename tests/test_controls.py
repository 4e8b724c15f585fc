"""
Tests for the controls.xml reader.
"""

import os
import tempfile
import xml.etree.ElementTree as ET

from wheeldb.controls import parse_controls, read_controls


LOWERCASE = """\
<dat>
  <game romname="outrun" gamename="Out Run">
    <player number="1">
      <controls>
        <control name="270 Steering Wheel"/>
        <control name="Gear Shifter"/>
      </controls>
    </player>
  </game>
  <game romname="pacman">
    <player number="1"><controls><control name="4-way Joystick"/></controls></player>
  </game>
</dat>
"""

CAPITALIZED = """\
<Dat>
  <Game RomName="outrun">
    <Player><Controls><Control Name="270 Steering Wheel"/></Controls></Player>
  </Game>
</Dat>
"""


def parse(text: str) -> dict:
    """Helper to parse a controls document string."""
    return parse_controls(ET.fromstring(text))


class TestParseControls:
    """Tests for parse_controls()."""

    def test_matches_steering_wheel_lowercase_tags(self):
        """Test a steering wheel control is found with lowercase tags."""
        assert parse(LOWERCASE) == {"outrun": "270 Steering Wheel"}

    def test_matches_steering_wheel_capitalized_tags(self):
        """Test the same control is found with capitalized tags."""
        assert parse(CAPITALIZED) == {"outrun": "270 Steering Wheel"}

    def test_unions_tag_variants(self):
        """Test games under both tag spellings are all collected."""
        doc = (
            '<dat><game romname="outrun"><control name="Wheel"/></game>'
            '<Game RomName="hangon"><Control Name="Handlebar Paddle"/></Game></dat>'
        )
        assert parse(doc) == {"outrun": "Wheel", "hangon": "Handlebar Paddle"}

    def test_identifier_alias_fallback(self):
        """Test 'name' is used when no romname attribute exists."""
        doc = '<dat><game name="sprint2"><control name="steering wheel"/></game></dat>'
        assert parse(doc) == {"sprint2": "steering wheel"}

    def test_unit_without_identifier_is_skipped(self):
        """Test a game with no identifying attribute is ignored."""
        doc = '<dat><game><control name="Steering Wheel"/></game></dat>'
        assert parse(doc) == {}

    def test_falls_back_to_misc_details(self):
        """Test misc details text is searched when no control matches."""
        doc = (
            '<dat><game romname="turbo"><control name="Dial"/>'
            "<miscDetails>Uses a steering   wheel with gear</miscDetails></game></dat>"
        )
        assert parse(doc) == {"turbo": "Uses a steering wheel with gear"}

    def test_falls_back_to_whole_text(self):
        """Test whole unit text is searched last."""
        doc = '<dat><game romname="turbo"><notes>Has a paddle</notes></game></dat>'
        assert parse(doc) == {"turbo": "Has a paddle"}

    def test_control_match_wins_over_misc(self):
        """Test the control name is used before misc details."""
        doc = (
            '<dat><game romname="outrun"><control name="Steering Wheel"/>'
            "<miscDetails>wheel notes</miscDetails></game></dat>"
        )
        assert parse(doc)["outrun"] == "Steering Wheel"

    def test_no_match_excluded(self):
        """Test games without wheel terms are left out."""
        assert "pacman" not in parse(LOWERCASE)


class TestReadControls:
    """Tests for read_controls()."""

    def test_missing_file_returns_none(self):
        """Test a missing file means source unavailable."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert read_controls(os.path.join(tmpdir, "controls.xml")) is None

    def test_malformed_file_returns_none(self):
        """Test an unparseable file degrades to unavailable."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "controls.xml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("<dat><game romname='outrun'>")
            assert read_controls(path) is None

    def test_reads_file(self):
        """Test reading from disk."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "controls.xml")
            with open(path, "w", encoding="utf-8") as f:
                f.write(CAPITALIZED)
            assert read_controls(path) == {"outrun": "270 Steering Wheel"}
