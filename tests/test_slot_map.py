import pytest

from slotmap import (
    ForeignKeyError,
    Key,
    KeyOptions,
    SlotMap,
    SlotMapOverflowError,
)

MAX_U32 = 0xFFFFFFFF


def test_slot_map_lifecycle():
    slots = SlotMap(3)
    assert slots.count() == 0

    a = slots.insert("a")
    assert a == Key(0, 0)
    assert slots.count() == 1

    b = slots.insert("b")
    assert b == Key(1, 0)
    assert slots.count() == 2

    c = slots.insert("c")
    assert c == Key(2, 0)
    assert slots.count() == 3

    assert slots.get(a) == "a"
    assert slots.get(b) == "b"
    assert slots.get(c) == "c"
    assert a != b and a != c and b != c

    with pytest.raises(SlotMapOverflowError):
        slots.insert("d")
    assert slots.count() == 3

    assert slots.exists(a)
    slots.remove(a)
    assert slots.count() == 2
    assert not slots.exists(a)
    slots.remove(a)
    assert slots.count() == 2
    assert not slots.exists(a)

    slots.remove(c)
    assert slots.count() == 1
    assert not slots.exists(a)
    assert slots.exists(b)
    assert not slots.exists(c)

    assert slots.get(a) is None
    assert slots.get(b) == "b"
    assert slots.get(c) is None

    # free list is LIFO: c's slot comes back first
    d = slots.insert("d")
    assert d == Key(2, 1)
    assert slots.count() == 2
    assert d != c

    e = slots.insert("e")
    assert e == Key(0, 1)
    assert slots.count() == 3

    with pytest.raises(SlotMapOverflowError):
        slots.insert("f")

    assert slots.get(a) is None
    assert slots.get(b) == "b"
    assert slots.get(c) is None
    assert slots.get(d) == "d"
    assert slots.get(e) == "e"

    # slots whose generations saturate are never handed out again
    slots.remove(b)
    slots.remove(d)
    slots.remove(e)
    assert slots.count() == 0
    for key in (b, d, e):
        slots._allocator._generations[key.index] = MAX_U32 - 2
    assert slots.saturated_generations == 0

    for expected_saturated, old in enumerate((e, d, b), start=1):
        for _ in range(2):
            new = slots.insert("z")
            assert slots.count() == 1
            assert new.index == old.index
            slots.remove(new)
            assert slots.count() == 0
            assert not slots.exists(new)
        assert slots.saturated_generations == expected_saturated

    assert slots.count() == 0
    with pytest.raises(SlotMapOverflowError):
        slots.insert("z")

    slots.reset()
    assert slots.capacity == 3
    assert slots.saturated_generations == 0
    assert slots.count() == 0
    assert slots.insert("fresh") == Key(0, 0)


def test_recycle_key_reuses_generation():
    slots = SlotMap(3)

    a = slots.insert("a")
    assert a == Key(0, 0)
    assert slots.count() == 1

    slots.recycle(a)
    assert slots.count() == 0

    b = slots.insert("b")
    assert b == Key(0, 0)
    assert slots.count() == 1
    # the hazard recycle trades for: the old key now names the new value
    assert a == b
    assert slots.get(a) == "b"

    c = slots.insert("c")
    assert c == Key(1, 0)
    assert slots.count() == 2


def test_recycled_key_is_not_released_twice():
    slots = SlotMap(2)
    a = slots.insert("a")
    slots.recycle(a)
    assert slots.exists(a)

    slots.recycle(a)
    slots.remove(a)
    assert slots.free_count == 1
    assert slots.count() == 0

    assert slots.insert("b") == Key(0, 0)
    assert slots.insert("c") == Key(1, 0)
    with pytest.raises(SlotMapOverflowError):
        slots.insert("d")


def test_generation_saturation_with_narrow_counters():
    options = KeyOptions(index_bits=8, generation_bits=8)
    slots = SlotMap(2, options=options)
    keep = slots.insert("keep")

    seen = set()
    for generation in range(255):
        key = slots.insert(generation)
        assert key == Key(1, generation)
        assert key not in seen
        seen.add(key)
        slots.remove(key)
    assert slots.saturated_generations == 1
    assert slots.count() == 1

    # capacity effectively shrank by one
    with pytest.raises(SlotMapOverflowError):
        slots.insert("x")
    slots.remove(keep)
    assert slots.insert("y") == Key(0, 1)


def test_overflow_leaves_state_unchanged():
    slots = SlotMap(2)
    keys = [slots.insert(i) for i in range(2)]
    before = slots.stats()
    with pytest.raises(SlotMapOverflowError) as excinfo:
        slots.insert(2)
    assert excinfo.value.context["capacity"] == 2
    after = slots.stats()
    assert after["count"] == before["count"] == 2
    assert after["next_index"] == before["next_index"]
    assert after["overflows"] == 1
    assert [slots.get(k) for k in keys] == [0, 1]


def test_zero_capacity_overflows_immediately():
    slots = SlotMap(0)
    with pytest.raises(SlotMapOverflowError):
        slots.insert("a")
    assert len(slots) == 0


def test_none_key_is_never_live():
    slots = SlotMap(2)
    slots.insert("a")
    assert not slots.exists(None)
    assert slots.get(None, "missing") == "missing"
    assert not slots.exists(Key(0, MAX_U32))
    slots.remove(None)
    slots.recycle(None)
    assert slots.count() == 1


@pytest.mark.skipif(not __debug__, reason="precondition checks are debug-only")
def test_foreign_keys_are_detected():
    slots = SlotMap(4)
    with pytest.raises(ForeignKeyError):
        slots.exists(Key(2, 0))
    slots.insert("a")
    with pytest.raises(ForeignKeyError):
        slots.exists(Key(0, 5))
    with pytest.raises(ForeignKeyError):
        slots.get(Key(3, 0))


def test_reset_invalidates_old_keys_without_error():
    slots = SlotMap(3)
    a = slots.insert("a")
    b = slots.insert("b")
    slots.reset()
    assert not slots.exists(a)
    assert not slots.exists(b)
    assert slots.get(b) is None
    assert slots.count() == 0


def test_stored_none_is_distinguishable():
    slots = SlotMap(1)
    key = slots.insert(None)
    assert slots.exists(key)
    assert key in slots
    assert slots[key] is None
    assert slots.get(key, "default") is None


def test_mapping_protocol():
    slots = SlotMap(2)
    key = slots.insert([1])
    slots[key].append(2)
    assert slots.get(key) == [1, 2]

    slots[key] = "replaced"
    assert slots[key] == "replaced"
    assert len(slots) == 1
    assert "not a key" not in slots

    slots.remove(key)
    with pytest.raises(KeyError):
        slots[key]
    with pytest.raises(KeyError):
        slots[key] = "again"


def test_aliases_match_original_names():
    slots = SlotMap(2)
    key = slots.put("v")
    assert slots.contains_key(key)
    slots.recycle_all()
    assert slots.count() == 0


def test_remove_drops_value_reference():
    slots = SlotMap(1)
    key = slots.insert(object())
    slots.remove(key)
    assert slots._values[key.index] is None
