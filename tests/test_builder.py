"""Tests for flagforge.builder: building flag types from ordered tables."""

import pickle

import pytest

from flagforge.bits import U16
from flagforge.builder import define_flags
from flagforge.flags import BitFlags, DefinitionError, Flag, ZeroFlagWarning

Picklable = define_flags("Picklable", [("A", 1), ("B", 2)], bits="u8")


class TestDefineFlags:
    def test_from_pairs(self) -> None:
        Perms = define_flags("Perms", [("READ", 1), ("WRITE", 2)], bits="u8")
        assert issubclass(Perms, BitFlags)
        assert Perms.__name__ == "Perms"
        assert Perms.FLAGS == (Flag("READ", 1), Flag("WRITE", 2))
        assert str(Perms.from_bits_retain(3)) == "READ | WRITE"

    def test_from_mapping(self) -> None:
        Perms = define_flags("Perms", {"X": 4, "Y": 8}, bits=U16)
        assert Perms.BITS is U16
        assert [f.name for f in Perms.FLAGS] == ["X", "Y"]

    def test_default_bits(self) -> None:
        Perms = define_flags("Perms", [("A", 1 << 31)])
        assert Perms.BITS.name == "u32"

    def test_doc_and_module(self) -> None:
        Perms = define_flags("Perms", [("A", 1)], doc="Permission bits.", module="myproj.flags")
        assert Perms.__doc__ == "Permission bits."
        assert Perms.__module__ == "myproj.flags"

    def test_module_defaults_to_caller(self) -> None:
        Perms = define_flags("Perms", [("A", 1)])
        assert Perms.__module__ == __name__

    def test_module_level_values_pickle(self) -> None:
        value = Picklable.A | Picklable.B
        restored = pickle.loads(pickle.dumps(value))
        assert restored == value
        assert type(restored) is Picklable

    def test_instances_have_no_dict(self) -> None:
        Perms = define_flags("Perms", [("A", 1)])
        with pytest.raises(AttributeError):
            Perms.A.extra = 1  # type: ignore[attr-defined]

    def test_types_are_independent(self) -> None:
        First = define_flags("Same", [("A", 1)])
        Second = define_flags("Same", [("A", 1)])
        assert First.A != Second.A


class TestDefineFlagsValidation:
    def test_duplicate_name(self) -> None:
        with pytest.raises(DefinitionError, match="duplicate flag name 'A'"):
            define_flags("Perms", [("A", 1), ("B", 2), ("A", 4)])

    def test_invalid_class_name(self) -> None:
        with pytest.raises(DefinitionError, match="not a valid class name"):
            define_flags("my flags", [("A", 1)])

    @pytest.mark.parametrize("name", ["1A", "has space", "", "a-b"])
    def test_invalid_flag_name(self, name: str) -> None:
        with pytest.raises(DefinitionError, match="not a valid flag name"):
            define_flags("Perms", [(name, 1)])

    def test_keyword_flag_name(self) -> None:
        with pytest.raises(DefinitionError, match="not a valid flag name"):
            define_flags("Perms", [("class", 1)])

    def test_keyword_class_name(self) -> None:
        with pytest.raises(DefinitionError, match="not a valid class name"):
            define_flags("class", [("A", 1)])

    def test_underscore_flag_name(self) -> None:
        with pytest.raises(DefinitionError, match="must not start with '_'"):
            define_flags("Perms", [("_A", 1)])

    def test_reserved_flag_name(self) -> None:
        with pytest.raises(DefinitionError, match="shadows a BitFlags member"):
            define_flags("Perms", [("contains", 1)])

    def test_non_int_value(self) -> None:
        with pytest.raises(DefinitionError, match="value must be int"):
            define_flags("Perms", [("A", "1")])  # type: ignore[list-item]

    def test_bool_value(self) -> None:
        with pytest.raises(DefinitionError, match="value must be int"):
            define_flags("Perms", [("A", True)])

    def test_value_too_wide(self) -> None:
        with pytest.raises(DefinitionError, match="does not fit in u8"):
            define_flags("Perms", [("A", 256)], bits="u8")

    def test_zero_value_warns(self) -> None:
        with pytest.warns(ZeroFlagWarning):
            Perms = define_flags("Perms", [("NONE", 0), ("A", 1)], bits="u8")
        assert Perms.empty().contains(Perms.NONE)
