import pytest

from placement_designer.clipboard import Clipboard, new_placement_id


def test_empty_clipboard_pastes_nothing():
    clip = Clipboard()
    assert not clip.has_clipboard()
    assert clip.paste() is None


def test_paste_shifts_position_and_keeps_size(make_placement):
    clip = Clipboard()
    clip.copy(make_placement("a", rect=(0.1, 0.2, 0.3, 0.05)))
    pasted = clip.paste(lambda: "b", 0.02, 0.02)
    assert pasted.id == "b"
    assert pasted.rect.x == pytest.approx(0.12)
    assert pasted.rect.y == pytest.approx(0.22)
    assert pasted.rect.w == 0.3
    assert pasted.rect.h == 0.05


def test_paste_clamps_position(make_placement):
    clip = Clipboard()
    clip.copy(make_placement("a", rect=(0.99, 0.995, 0.3, 0.05)))
    pasted = clip.paste(offset_x=0.02, offset_y=0.02)
    assert pasted.rect.x == 1.0
    assert pasted.rect.y == 1.0
    assert pasted.rect.w == 0.3


def test_copy_is_a_value_snapshot(make_placement):
    clip = Clipboard()
    original = make_placement("a")
    clip.copy(original)
    original.label = "changed"
    original.rect.x = 0.9
    pasted = clip.paste()
    assert pasted.label == ""
    assert pasted.rect.x == 0.1


def test_each_paste_gets_a_fresh_id(make_placement):
    clip = Clipboard()
    clip.copy(make_placement("a"))
    first, second = clip.paste(), clip.paste()
    assert len({"a", first.id, second.id}) == 3
    assert first.style is not second.style


def test_clear(make_placement):
    clip = Clipboard()
    clip.copy(make_placement("a"))
    clip.clear()
    assert clip.paste() is None


def test_new_placement_id_is_unique():
    assert new_placement_id() != new_placement_id()
