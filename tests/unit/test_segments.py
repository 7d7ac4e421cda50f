import pytest
from src.vm_translator.ast import Segment
from src.vm_translator.segments import (
    is_segment, segment_from_name, seg_ptr, pointer_cell, temp_address, static_symbol,
)

def test_names_and_pointers():
    assert segment_from_name("argument") is Segment.ARGUMENT
    assert is_segment("temp")
    assert not is_segment("Local")
    assert [seg_ptr(s) for s in (Segment.LOCAL, Segment.ARGUMENT, Segment.THIS, Segment.THAT)] \
        == ["LCL", "ARG", "THIS", "THAT"]

def test_fixed_offset_segments():
    assert temp_address(0) == 5
    assert temp_address(7) == 12
    assert pointer_cell(0) == "THIS"
    assert pointer_cell(1) == "THAT"
    assert static_symbol("Main", 3) == "Main.3"

def test_invalid():
    with pytest.raises(ValueError):
        segment_from_name("heap")
    with pytest.raises(ValueError):
        seg_ptr(Segment.CONSTANT)
    with pytest.raises(ValueError):
        seg_ptr(Segment.STATIC)
    with pytest.raises(ValueError):
        pointer_cell(2)
    with pytest.raises(ValueError):
        temp_address(8)
