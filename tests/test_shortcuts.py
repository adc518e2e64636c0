import pytest

from placement_designer.shortcuts import (
    KEY_BACKSPACE, KEY_DELETE, KEY_ESCAPE, KeyStroke, ShortcutRouter,
)


class RecordingActions:
    def __init__(self, selected_id="p1"):
        self.selected_id = selected_id
        self.calls = []

    def _record(self, name):
        self.calls.append(name)
        return True

    def copy_selected(self):
        return self._record("copy")

    def paste(self):
        return self._record("paste")

    def delete_selected(self):
        return self._record("delete")

    def deselect(self):
        return self._record("deselect")

    def undo(self):
        return self._record("undo")

    def redo(self):
        return self._record("redo")


@pytest.fixture()
def actions():
    return RecordingActions()


@pytest.fixture()
def router(actions):
    r = ShortcutRouter(actions)
    r.enable()
    return r


@pytest.mark.parametrize("stroke, expected", [
    (KeyStroke("c", ctrl=True), "copy"),
    (KeyStroke("c", meta=True), "copy"),
    (KeyStroke("v", ctrl=True), "paste"),
    (KeyStroke("z", ctrl=True), "undo"),
    (KeyStroke("z", meta=True, shift=True), "redo"),
    (KeyStroke("y", ctrl=True), "redo"),
    (KeyStroke(KEY_DELETE), "delete"),
    (KeyStroke(KEY_BACKSPACE), "delete"),
    (KeyStroke(KEY_ESCAPE), "deselect"),
])
def test_routes_and_consumes(router, actions, stroke, expected):
    assert router.handle(stroke) is True
    assert actions.calls == [expected]


def test_text_input_focus_bypasses_everything(router, actions):
    for stroke in (
        KeyStroke("c", ctrl=True, text_input_focused=True),
        KeyStroke("v", ctrl=True, text_input_focused=True),
        KeyStroke(KEY_BACKSPACE, text_input_focused=True),
        KeyStroke(KEY_ESCAPE, text_input_focused=True),
    ):
        assert router.handle(stroke) is False
    assert actions.calls == []


def test_selection_dependent_keys_need_a_selection(actions, router):
    actions.selected_id = None
    assert router.handle(KeyStroke("c", ctrl=True)) is False
    assert router.handle(KeyStroke(KEY_DELETE)) is False
    assert router.handle(KeyStroke(KEY_ESCAPE)) is False
    assert actions.calls == []


def test_paste_is_consumed_without_selection(actions, router):
    actions.selected_id = None
    assert router.handle(KeyStroke("v", meta=True)) is True
    assert actions.calls == ["paste"]


def test_unbound_keys_pass_through(router, actions):
    assert router.handle(KeyStroke("c")) is False
    assert router.handle(KeyStroke("q", ctrl=True)) is False
    assert router.handle(KeyStroke(KEY_DELETE, ctrl=True)) is False
    assert actions.calls == []


def test_disabled_router_ignores_keys(actions):
    router = ShortcutRouter(actions)
    assert router.handle(KeyStroke("v", ctrl=True)) is False
    with router.active():
        assert router.enabled
        assert router.handle(KeyStroke("v", ctrl=True)) is True
    assert not router.enabled
    assert actions.calls == ["paste"]
