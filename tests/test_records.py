from dataclasses import dataclass, field
from typing import Dict, List

import pytest

from hashstruct.core.config import HashOptions
from hashstruct.core.hashing import hash_value
from hashstruct.core.hooks import Includable, IncludableMap
from hashstruct.exceptions import HookError


@dataclass
class Named:
    Name: str
    UUID: str = field(default="", metadata={"hash": "ignore"})


@dataclass
class NamedNoTag:
    Name: str
    UUID: str = ""


@dataclass
class NameOnly:
    Name: str


@dataclass
class NameWithCount:
    Name: str
    Count: int = 0


@dataclass
class Tagged:
    items: List = field(default_factory=list, metadata={"hash": "set"})


@dataclass
class Untagged:
    items: List = field(default_factory=list)


@dataclass
class TaggedBytes:
    data: bytes = field(default=b"", metadata={"hash": "set"})


@dataclass
class WithHidden:
    Name: str
    _secret: str = ""


@dataclass
class OddTag:
    Name: str = field(default="", metadata={"hash": "whatever"})


@dataclass
class SkipsUUID(Includable):
    Name: str
    UUID: str = ""

    def should_hash_field(self, field, value):
        return field != "UUID"


@dataclass
class Labels(IncludableMap):
    labels: Dict[str, str] = field(default_factory=dict)
    seen: List = field(default_factory=list, metadata={"hash": "ignore"})

    def should_hash_map_entry(self, field, key, value):
        self.seen.append((field, key, value))
        return not key.startswith("tmp-")


@dataclass
class BrokenField(Includable):
    Name: str

    def should_hash_field(self, field, value):
        raise RuntimeError("boom")


@dataclass
class BrokenMap(IncludableMap):
    labels: Dict[str, int] = field(default_factory=dict)

    def should_hash_map_entry(self, field, key, value):
        raise KeyError(key)


# -------------------------
# Annotations
# -------------------------
def test_ignore_annotation():
    # Scenario C
    assert hash_value(Named("x", "u1")) == hash_value(Named("x", "u2"))


def test_without_ignore_annotation_field_counts():
    assert hash_value(NamedNoTag("x", "u1")) != hash_value(NamedNoTag("x", "u2"))


def test_zero_valued_member_changes_digest():
    assert hash_value(NameOnly("x")) != hash_value(NameWithCount("x", 0))


def test_set_annotation_is_order_independent():
    assert hash_value(Tagged(["a", "b", "c"])) == hash_value(Tagged(["c", "a", "b"]))
    assert hash_value(Tagged(["a", "b"])) != hash_value(Tagged(["a", "c"]))


def test_set_annotation_matches_builtin_set():
    assert hash_value(Tagged([1, 2, 3])) == hash_value({3, 2, 1})


def test_untagged_list_is_order_sensitive():
    assert hash_value(Untagged([1, 2, 3])) != hash_value(Untagged([3, 2, 1]))


def test_set_annotation_on_bytes():
    assert hash_value(TaggedBytes(b"abc")) == hash_value(TaggedBytes(b"cab"))
    assert hash_value(TaggedBytes(b"abc")) != hash_value(TaggedBytes(b"abd"))


def test_set_flag_does_not_leak_into_nested_lists():
    a = Tagged([[1, 2], [3]])
    b = Tagged([[3], [1, 2]])
    c = Tagged([[2, 1], [3]])
    assert hash_value(a) == hash_value(b)
    assert hash_value(a) != hash_value(c)


def test_unknown_annotation_is_accepted():
    assert hash_value(OddTag("x")) == hash_value(NameOnly("x"))


def test_custom_tag_name():
    @dataclass
    class Custom:
        Name: str
        UUID: str = field(default="", metadata={"digest": "ignore"})

    opts = HashOptions(tag_name="digest")
    assert hash_value(Custom("x", "a"), opts) == hash_value(Custom("x", "b"), opts)
    assert hash_value(Custom("x", "a")) != hash_value(Custom("x", "b"))


def test_hidden_members_are_invisible():
    assert hash_value(WithHidden("x", "one")) == hash_value(WithHidden("x", "two"))
    assert hash_value(WithHidden("x")) == hash_value(NameOnly("x"))


# -------------------------
# Hooks
# -------------------------
def test_includable_parity_with_ignore():
    assert hash_value(SkipsUUID("x", "u1")) == hash_value(Named("x", "u9"))
    assert hash_value(SkipsUUID("x", "u1")) == hash_value(SkipsUUID("x", "u2"))


def test_includable_map_filters_entries():
    a = Labels({"app": "web", "tmp-1": "a"})
    b = Labels({"app": "web", "tmp-2": "b"})
    assert hash_value(a) == hash_value(b)
    assert hash_value(a) == hash_value(Labels({"app": "web"}))
    assert ("labels", "app", "web") in a.seen


def test_includable_map_only_applies_to_owned_fields():
    # a bare mapping has no owning record, every entry is hashed
    assert hash_value({"app": "web", "tmp-1": "a"}) != hash_value({"app": "web"})


def test_registered_hook():
    @dataclass
    class Registered:
        Name: str
        UUID: str = ""

        def should_hash_field(self, field, value):
            return field == "Name"

    Includable.register(Registered)
    assert hash_value(Registered("x", "a")) == hash_value(Named("x", "b"))


def test_duck_typed_hook_is_not_consulted():
    @dataclass
    class Duck:
        Name: str
        UUID: str = ""

        def should_hash_field(self, field, value):
            return False

    assert hash_value(Duck("x", "a")) != hash_value(Duck("x", "b"))


def test_field_hook_error():
    with pytest.raises(HookError) as exc:
        hash_value(BrokenField("x"))
    assert exc.value.hook == "should_hash_field"
    assert exc.value.field == "Name"
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_map_hook_error_aborts_nested_call():
    with pytest.raises(HookError) as exc:
        hash_value([{"outer": BrokenMap({"k": 1})}])
    assert exc.value.hook == "should_hash_map_entry"
    assert exc.value.field == "labels"
    assert exc.value.key == "k"
    assert isinstance(exc.value.__cause__, KeyError)


def test_ignored_field_skips_hook():
    @dataclass
    class Counting(Includable):
        Name: str
        UUID: str = field(default="", metadata={"hash": "ignore"})
        calls: List = field(default_factory=list, metadata={"hash": "ignore"})

        def should_hash_field(self, field, value):
            self.calls.append(field)
            return True

    rec = Counting("x")
    hash_value(rec)
    assert rec.calls == ["Name"]


# -------------------------
# Slotted records
# -------------------------
class SlotPoint:
    __slots__ = ("x", "y")

    def __init__(self, x, y):
        self.x = x
        self.y = y


class SlotBase:
    __slots__ = ("a",)

    def __init__(self, a):
        self.a = a


class SlotChild(SlotBase):
    __slots__ = ("b", "__private")

    def __init__(self, a, b, private=None):
        super().__init__(a)
        self.b = b
        self.__private = private


class SlotsAndDict:
    __slots__ = ("x", "__dict__")

    def __init__(self, x, y):
        self.x = x
        self.y = y


class PartlySet:
    __slots__ = ("x",)


def test_slotted_record():
    assert hash_value(SlotPoint(1, 2)) == hash_value((1, 2))
    assert hash_value(SlotPoint(1, 2)) != hash_value(SlotPoint(2, 1))


def test_slots_follow_base_class_first():
    assert hash_value(SlotChild(1, 2)) == hash_value((1, 2))


def test_private_slot_is_hidden():
    assert hash_value(SlotChild(1, 2, "one")) == hash_value(SlotChild(1, 2, "two"))


def test_slots_and_dict_both_count():
    assert hash_value(SlotsAndDict(1, 2)) == hash_value((1, 2))
    assert hash_value(SlotsAndDict(1, 2)) != hash_value(SlotsAndDict(3, 2))


def test_unset_slot_hashes_as_absent():
    assert hash_value(PartlySet()) == hash_value(None)
