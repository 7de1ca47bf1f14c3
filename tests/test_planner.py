"""Tests for variable descriptors and address planning."""

import pytest
from s7link.core.config import Area, AreaCode, S7Type, WordLen
from s7link.core.exceptions import S7InvalidDescriptorError, S7UnsupportedTypeError
from s7link.core.planner import ByteRange, plan_item, plan_items, plan_range
from s7link.core.variables import S7Variable


class TestS7Variable:
    """Tests for S7Variable construction and validation."""

    def test_names_are_normalized(self):
        """Test string type and area names become enums."""
        v = S7Variable("real", start=4, area="DB", db_number=1)
        assert v.type is S7Type.REAL
        assert v.area is Area.DB

    def test_unknown_type(self):
        """Test unknown type names are rejected at construction."""
        with pytest.raises(S7UnsupportedTypeError):
            S7Variable("STRING", start=0)

    def test_unknown_area(self):
        """Test unknown area names are rejected at construction."""
        with pytest.raises(S7InvalidDescriptorError):
            S7Variable("INT", start=0, area="xx")

    def test_bit_none_defaults_to_zero(self):
        """Test an explicit bit=None is treated as 0."""
        assert S7Variable("INT", start=0, bit=None).bit == 0

    @pytest.mark.parametrize("start", [-1, 1.5, "3", True])
    def test_invalid_start(self, start):
        """Test start must be a non-negative integer."""
        with pytest.raises(S7InvalidDescriptorError, match="start"):
            S7Variable("BYTE", start=start).validate()

    @pytest.mark.parametrize("bit", [-1, 8])
    def test_bit_out_of_range(self, bit):
        """Test bit must be 0-7."""
        with pytest.raises(S7InvalidDescriptorError, match="bit"):
            S7Variable("BOOL", start=0, bit=bit).validate()

    def test_bit_only_for_bool(self):
        """Test a bit offset on a non-BOOL type is rejected."""
        with pytest.raises(S7InvalidDescriptorError, match="only valid for BOOL"):
            S7Variable("INT", start=0, bit=3).validate()

    def test_area_required_for_batch(self):
        """Test batched access requires an area."""
        v = S7Variable("INT", start=0)
        v.validate()
        with pytest.raises(S7InvalidDescriptorError, match="area"):
            v.validate(require_area=True)

    @pytest.mark.parametrize("db_number", [None, 0, -3])
    def test_db_area_requires_db_number(self, db_number):
        """Test area=db requires a positive DB number."""
        with pytest.raises(S7InvalidDescriptorError, match="db_number"):
            S7Variable("INT", start=0, area=Area.DB, db_number=db_number).validate(require_area=True)

    def test_db_number_rejected_outside_db(self):
        """Test a DB number on a non-DB area is rejected."""
        with pytest.raises(S7InvalidDescriptorError, match="only valid for area=db"):
            S7Variable("INT", start=0, area=Area.MK, db_number=5).validate(require_area=True)

    def test_valid_batch_variable(self):
        """Test well-formed variables validate."""
        S7Variable("BOOL", start=3, bit=7, area="mk").validate(require_area=True)
        S7Variable("DINT", start=8, area="db", db_number=12).validate(require_area=True)


class TestPlanRange:
    """Tests for contiguous range planning."""

    def test_covering_range(self):
        """Test range spans from the first byte to the end of the last value."""
        variables = [
            S7Variable(S7Type.BOOL, start=4, bit=2),
            S7Variable(S7Type.INT, start=13),
        ]
        assert plan_range(variables) == ByteRange(offset=4, length=11)

    def test_order_independent(self):
        """Test input order does not affect the range."""
        variables = [
            S7Variable(S7Type.REAL, start=20),
            S7Variable(S7Type.BYTE, start=2),
            S7Variable(S7Type.WORD, start=10),
        ]
        assert plan_range(variables) == ByteRange(offset=2, length=22)

    def test_widest_value_defines_end(self):
        """Test a wider value starting earlier can define the end."""
        variables = [
            S7Variable(S7Type.DWORD, start=0),
            S7Variable(S7Type.BOOL, start=1, bit=0),
        ]
        assert plan_range(variables) == ByteRange(offset=0, length=4)

    def test_single_variable(self):
        """Test range of a single value is its own width."""
        assert plan_range([S7Variable(S7Type.DINT, start=100)]) == ByteRange(100, 4)

    def test_empty(self):
        """Test empty request plans nothing."""
        assert plan_range([]) is None


class TestPlanItems:
    """Tests for batched item planning."""

    def test_bool_is_bit_addressed(self):
        """Test BOOL start is counted in bits with the bit word length."""
        item = plan_item(S7Variable(S7Type.BOOL, start=5, bit=2, area=Area.MK))
        assert item.start == 42
        assert item.word_len == WordLen.BIT
        assert item.amount == 1

    def test_int_is_byte_addressed(self):
        """Test non-BOOL start stays in bytes with the type's word length."""
        item = plan_item(S7Variable(S7Type.INT, start=13, area=Area.DB, db_number=3))
        assert item.start == 13
        assert item.word_len == WordLen.WORD
        assert item.area == AreaCode.DB
        assert item.db_number == 3

    def test_area_codes(self):
        """Test every area maps to its transport code."""
        expected = {
            Area.PE: 0x81,
            Area.PA: 0x82,
            Area.MK: 0x83,
            Area.CT: 0x1C,
            Area.TM: 0x1D,
        }
        for area, code in expected.items():
            item = plan_item(S7Variable(S7Type.BYTE, start=0, area=area))
            assert item.area == code
            assert item.db_number == 0

    def test_order_preserved(self):
        """Test items keep the order of the input variables."""
        variables = [
            S7Variable(S7Type.REAL, start=8, area=Area.DB, db_number=1),
            S7Variable(S7Type.BOOL, start=0, bit=1, area=Area.PE),
            S7Variable(S7Type.WORD, start=2, area=Area.PA),
        ]
        items = plan_items(variables)
        assert [i.start for i in items] == [8, 1, 2]
        assert [i.word_len for i in items] == [WordLen.DWORD, WordLen.BIT, WordLen.WORD]

    def test_with_data(self):
        """Test write planning encodes each value."""
        variables = [
            S7Variable(S7Type.INT, start=0, area=Area.MK, value=-2),
            S7Variable(S7Type.BOOL, start=1, bit=4, area=Area.MK, value=True),
        ]
        items = plan_items(variables, with_data=True)
        assert items[0].data == b"\xff\xfe"
        assert items[1].data == b"\x01"
        assert items[1].start == 12

    def test_without_data(self):
        """Test read planning carries no data."""
        items = plan_items([S7Variable(S7Type.INT, start=0, area=Area.MK, value=7)])
        assert items[0].data is None
