import pytest

from siap.workflow.entries import EntryList


def test_add_then_remove_restores_previous_list():
    items = ["Guru aktif", "Perpustakaan rapi"]
    entries = EntryList(items)
    before = entries.items

    assert entries.add("Kelas kurang ventilasi")
    entries.remove(len(entries) - 1)

    assert entries.items == before


def test_buffer_commit_and_add_are_the_same_append():
    entries = EntryList([])
    entries.buffer = "Susun RKAS"
    assert entries.commit()
    assert entries.buffer == ""

    entries.buffer = "Susun RKAS"
    assert entries.add()
    assert entries.items == ["Susun RKAS", "Susun RKAS"]


def test_blank_entries_are_never_appended():
    entries = EntryList([])
    entries.buffer = "   "
    assert not entries.commit()
    assert not entries.add("")
    assert entries.items == []
    assert entries.buffer == "   "


def test_remove_keeps_order_of_remaining_entries():
    entries = EntryList(["a", "b", "c", "d"])
    assert entries.remove(1) == "b"
    assert entries.items == ["a", "c", "d"]
    with pytest.raises(IndexError):
        entries.remove(3)
