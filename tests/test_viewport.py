from placement_designer.models import DesignerSettings, PageSize
from placement_designer.viewport import ViewportSizing


def test_container_width_is_padded_and_bounded():
    vp = ViewportSizing()
    vp.on_container_resize(1000)
    assert vp.page_width == 968
    vp.on_container_resize(100)
    assert vp.page_width == 280
    vp.on_container_resize(5000)
    assert vp.page_width == 1200


def test_width_listener_only_fires_on_change():
    vp = ViewportSizing()
    widths = []
    vp.add_width_listener(widths.append)
    vp.on_container_resize(700)
    vp.on_container_resize(700)
    assert widths == [668]


def test_container_resize_remeasures_page():
    vp = ViewportSizing()
    sizes = []
    vp.add_listener(sizes.append)
    vp.set_measure(lambda: (968, 1250))
    vp.on_container_resize(1000)
    assert vp.page_size == PageSize(968, 1250)
    assert sizes == [PageSize(968, 1250)]


def test_implausible_measurements_are_ignored():
    vp = ViewportSizing(initial=PageSize(800, 1000))
    sizes = []
    vp.add_listener(sizes.append)
    vp.on_render_complete(10, 10)
    vp.on_render_complete(float("nan"), 900)
    vp.set_measure(lambda: None)
    vp.remeasure()
    assert vp.page_size == PageSize(800, 1000)
    assert sizes == []


def test_measure_floor_comes_from_settings():
    vp = ViewportSizing(DesignerSettings(measure_floor_px=5))
    vp.on_render_complete(10, 10)
    assert vp.page_size == PageSize(10, 10)


def test_render_complete_notifies_once_per_size():
    vp = ViewportSizing()
    sizes = []
    vp.add_listener(sizes.append)
    vp.on_render_complete(600, 800)
    vp.on_render_complete(600, 800)
    assert sizes == [PageSize(600, 800)]


def test_page_change_records_index_and_remeasures():
    measured = iter([(600, 800), (600, 400)])
    vp = ViewportSizing()
    vp.set_measure(lambda: next(measured))
    vp.on_page_change(1)
    assert vp.page_index == 1
    assert vp.page_size == PageSize(600, 800)
    vp.on_page_change(2)
    assert vp.page_size == PageSize(600, 400)
