"""Tests for XMF to ULT conversion."""

import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import build_xmf, registry_entry
from xmfconv.converters.xmf_to_ult import (
    DEFAULT_TRACK_PANS,
    SONG_TEXTS,
    XMFToULTConverter,
    convert_xmf_to_ult,
    default_output_path,
    remap_effect,
    remap_effects,
)
from xmfconv.formats.ult.reader import ULTReader
from xmfconv.formats.ult.writer import ULTWriter
from xmfconv.models.ult import ULTCell
from xmfconv.models.xmf import Instruction, XMFModule
from xmfconv.utils.validation import CapacityExceeded, TruncatedInput


class TestRemapEffect:
    """Test cases for single-effect remapping."""

    def test_global_volume_becomes_no_op(self):
        """Test that Set Global Volume is removed and its value kept."""
        assert remap_effect(0x10, 10, 15) == (0, 0, 10)

    def test_set_volume_scaled(self):
        """Test that Set Volume is scaled by the current global volume."""
        assert remap_effect(0x0C, 15, 10) == (0x0C, 10, 10)
        assert remap_effect(0x0C, 0x40, 15) == (0x0C, 0x40, 15)
        assert remap_effect(0x0C, 7, 3) == (0x0C, 1, 3)

    def test_set_volume_clamped(self):
        """Test that large products are clamped to one byte."""
        assert remap_effect(0x0C, 200, 0xFF) == (0x0C, 0xFF, 0xFF)

    def test_other_effects_unchanged(self):
        """Test pass-through of effects other than volume."""
        assert remap_effect(0x0F, 6, 4) == (0x0F, 6, 4)
        assert remap_effect(0x00, 0, 4) == (0x00, 0, 4)


def single_track(*instructions):
    """Build one section with the given instructions on rows 0..n of track 0."""
    module = XMFModule.create_empty(sample_count=1, section_count=1)
    for row, instruction in enumerate(instructions):
        module.sections[0].rows[row].columns[0] = instruction
    return module.sections


class TestRemapEffects:
    """Test cases for the per-track remap fold."""

    def test_global_volume_carries_to_later_rows(self):
        """Test that a global volume applies to later Set Volume commands."""
        sections = single_track(
            Instruction(note=60, sample_number=1, func1=0x10, func1_param=10),
            Instruction(func1=0x0C, func1_param=15),
        )

        result = remap_effects(sections, 1)

        assert result.track_data[0][0] == ULTCell(60, 1, 0x00, 0, 0)
        assert result.track_data[0][1] == ULTCell(0, 0, 0xC0, 0, 10)
        assert result.global_volume == [10]

    def test_initial_global_volume_is_zero(self):
        """Test that Set Volume before any global volume is scaled to 0."""
        sections = single_track(Instruction(func1=0x0C, func1_param=0x40))

        assert remap_effects(sections, 1).track_data[0][0].param1 == 0

    def test_slot_two_sees_slot_one(self):
        """Test that slot 2 uses the global volume set by slot 1 of the same cell."""
        sections = single_track(
            Instruction(func1=0x10, func1_param=5, func2=0x0C, func2_param=30),
        )

        cell = remap_effects(sections, 1).track_data[0][0]

        assert (cell.effect1, cell.param1) == (0, 0)
        assert (cell.effect2, cell.param2) == (0x0C, 10)

    def test_slot_two_writes_its_own_param(self):
        """Test that remapping slot 2 leaves slot 1's parameter alone."""
        sections = single_track(
            Instruction(func1=0x0F, func1_param=6, func2=0x10, func2_param=9),
        )

        result = remap_effects(sections, 1)
        cell = result.track_data[0][0]

        assert (cell.effect1, cell.param1) == (0x0F, 6)
        assert (cell.effect2, cell.param2) == (0, 0)
        assert result.global_volume == [9]

    def test_tracks_are_independent(self):
        """Test that each column keeps its own global volume."""
        module = XMFModule.create_empty(sample_count=2, section_count=1)
        module.sections[0].rows[0].columns[0] = Instruction(func1=0x10, func1_param=15)
        module.sections[0].rows[1].columns[0] = Instruction(func1=0x0C, func1_param=20)
        module.sections[0].rows[1].columns[1] = Instruction(func1=0x0C, func1_param=20)

        result = remap_effects(module.sections, 2)

        assert result.track_data[0][1].param1 == 20
        assert result.track_data[1][1].param1 == 0
        assert result.global_volume == [15, 0]

    def test_state_carries_across_sections(self):
        """Test that the fold runs over sections in stored order."""
        module = XMFModule.create_empty(sample_count=1, section_count=2)
        module.sections[0].rows[63].columns[0] = Instruction(func2=0x10, func2_param=3)
        module.sections[1].rows[0].columns[0] = Instruction(func2=0x0C, func2_param=10)

        result = remap_effects(module.sections, 1)

        assert len(result.track_data[0]) == 128
        assert result.track_data[0][64].param2 == 2

    def test_wide_effect_codes_reported(self):
        """Test that codes above 0x0F are masked and reported."""
        sections = single_track(Instruction(func1=0x14, func1_param=1))

        result = remap_effects(sections, 1)

        assert result.unsupported_effects == {0x14}
        assert result.track_data[0][0].effect1 == 0x04


class TestXMFToULTConverter:
    """Test cases for XMFToULTConverter."""

    def test_convert_minimal(self, xmf_data):
        """Test converting a one-sample, one-section module."""
        ult = XMFToULTConverter().convert_bytes(xmf_data, "MAIN1.XMF")

        assert ult.title == "MAIN1.XMF"
        assert ult.texts == SONG_TEXTS
        assert ult.track_count == 1
        assert ult.pattern_count == 1
        assert ult.pattern_orders == [0] + [0xFF] * 255
        assert ult.track_pans == [0x03]
        assert ult.get_cell(0, 0, 0) == ULTCell(60, 1, 0, 0, 0)
        assert ult.validate() == []

    def test_sample_mapping(self):
        """Test registry fields carried into the ULT sample descriptor."""
        registry = [
            registry_entry(
                100, 104, playback_shift=2, start_shift=3, param0=0x30, flags=0x08, frequency=8000
            )
        ]
        data = build_xmf(samples=[bytes([1, 2, 3, 4])], registry=registry)

        sample = XMFToULTConverter().convert_bytes(data).samples[0]

        assert sample.name == "Sample 1"
        assert sample.dos_name == "Sample1.RAW"
        assert (sample.loop_start, sample.loop_end) == (2, 3)
        assert (sample.size_start, sample.size_end) == (100, 104)
        assert sample.length == 4
        assert (sample.volume, sample.flags) == (0x30, 0x08)
        assert (sample.frequency, sample.finetune) == (8000, 0)
        assert sample.data == bytes([1, 2, 3, 4])

    def test_sample_numbering(self):
        """Test that samples are numbered in registry order from 1."""
        data = build_xmf(samples=[b"\x01", b"\x02\x03", b"\x04"])

        ult = XMFToULTConverter().convert_bytes(data)

        assert [s.name for s in ult.samples] == ["Sample 1", "Sample 2", "Sample 3"]

    def test_order_table_padded(self):
        """Test that played sections fill the order table head."""
        data = build_xmf(section_indexes=(1, 0, 1), section_count=2)

        ult = XMFToULTConverter().convert_bytes(data)

        assert ult.pattern_orders[:4] == [1, 0, 1, 0xFF]
        assert len(ult.pattern_orders) == 256
        assert ult.active_patterns == 3

    def test_pans_truncated_to_tracks(self):
        """Test that the pan table is cut to the track count."""
        data = build_xmf(sample_count=6, section_count=1)

        ult = XMFToULTConverter().convert_bytes(data)

        assert ult.track_pans == [0x03, 0x0C, 0x0C, 0x03, 0x03, 0x0C]
        assert ult.track_pans == DEFAULT_TRACK_PANS[:6]

    def test_custom_pans(self):
        """Test a caller-supplied pan table."""
        data = build_xmf(sample_count=2)

        ult = XMFToULTConverter(pans=[7, 8, 9]).convert_bytes(data)

        assert ult.track_pans == [7, 8]

    def test_short_pan_table_rejected(self):
        """Test that a pan table shorter than the track count is an error."""
        data = build_xmf(sample_count=3)

        with pytest.raises(CapacityExceeded, match="Pan table"):
            XMFToULTConverter(pans=[1, 2]).convert_bytes(data)

    def test_played_sections_limit(self):
        """Test that more than 256 played sections do not fit the order table."""
        module = XMFModule.create_empty()
        module.section_indexes = [0] * 257

        with pytest.raises(CapacityExceeded, match="order table"):
            XMFToULTConverter().convert_module(module)

    def test_wide_effect_warning(self, caplog):
        """Test that truncated effect codes are logged."""
        data = build_xmf(cells={(0, 0, 0): (0, 0, 0x1A, 0, 0, 0)})

        with caplog.at_level(logging.WARNING, logger="xmfconv"):
            XMFToULTConverter().convert_bytes(data, "SONG.XMF")

        assert "0x1A" in caplog.text

    def test_converted_module_roundtrips(self):
        """Test that converted output reads back as the same module."""
        cells = {
            (0, 0, 0): (60, 1, 0x10, 0x0C, 15, 10),
            (0, 1, 1): (0xFC, 2, 0x0F, 0, 0, 6),
        }
        data = build_xmf(samples=[b"\x01\x02", b"\x03"], sample_count=2, cells=cells)
        ult = XMFToULTConverter().convert_bytes(data, "SONG.XMF")

        loaded = ULTReader().parse_bytes(ULTWriter().to_bytes(ult))

        assert loaded.get_cell(0, 0, 0) == ULTCell(60, 1, 0x0C, 10, 0)
        assert loaded.get_cell(1, 0, 1) == ULTCell(0xFC, 2, 0xF0, 0, 6)
        assert loaded.title.rstrip() == "SONG.XMF"


class TestConvertFile:
    """Test cases for file-level conversion."""

    def test_default_output_path(self):
        """Test that .ULT is appended to the full source name."""
        assert default_output_path(Path("music/MAIN1.XMF")) == Path("music/MAIN1.XMF.ULT")

    def test_convert_xmf_to_ult(self, xmf_file):
        """Test the convenience function writes next to the source."""
        output = convert_xmf_to_ult(xmf_file)

        assert output == xmf_file.with_name("MAIN1.XMF.ULT")
        ult = ULTReader.read(output)
        assert ult.title.rstrip() == "MAIN1.XMF"
        assert ult.samples[0].frequency == 8000
        assert ult.samples[0].length == 4

    def test_convert_to_explicit_path(self, xmf_file, tmp_path):
        """Test writing to a chosen output path."""
        target = tmp_path / "out" / "song.ult"

        assert convert_xmf_to_ult(xmf_file, target, compress=True) == target
        assert ULTReader.can_read(target)

    def test_bad_input_writes_nothing(self, tmp_path):
        """Test that a truncated source leaves no output file."""
        source = tmp_path / "BAD.XMF"
        source.write_bytes(b"\x01" * 50)

        with pytest.raises(TruncatedInput):
            convert_xmf_to_ult(source)

        assert not (tmp_path / "BAD.XMF.ULT").exists()
