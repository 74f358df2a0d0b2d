from siap.core.imaging import decode_image
from siap.signature.pad import SignatureCapture
from siap.signature.pointer import ClientRect, PointerMessage, from_mouse_events, from_touch_events

INK = (15, 23, 42, 255)


def test_begin_then_end_without_movement_produces_no_artifact():
    saved: list[str] = []
    pad = SignatureCapture(on_save=saved.append)
    pad.begin((10, 10))
    assert pad.end() is None
    assert saved == []
    assert not pad.has_ink
    assert pad.artifact == ""


def test_stroke_produces_png_artifact_and_clear_resets_it():
    saved: list[str] = []
    pad = SignatureCapture(on_save=saved.append)
    pad.begin((10, 10))
    pad.extend((100, 10))
    artifact = pad.end()

    assert artifact and artifact.startswith("data:image/png;base64,")
    assert saved == [artifact]
    image = decode_image(artifact).convert("RGBA")
    assert image.size == (500, 176)
    assert image.getpixel((50, 10)) == INK
    assert image.getpixel((50, 100))[3] == 0

    pad.clear()
    assert saved[-1] == ""
    assert pad.artifact == ""
    assert not pad.has_ink


def test_extend_without_active_stroke_is_a_noop():
    pad = SignatureCapture()
    pad.extend((20, 20))
    assert not pad.has_ink
    assert pad.end() is None


def test_empty_gesture_does_not_overwrite_previous_artifact():
    saved: list[str] = []
    pad = SignatureCapture(on_save=saved.append)
    pad.begin((10, 10))
    pad.extend((40, 40))
    first = pad.end()

    pad.extend((300, 100))  # no active stroke
    assert pad.artifact == first
    assert saved == [first]


def test_client_points_are_mapped_by_display_scale():
    pad = SignatureCapture()
    # Displayed at half size, offset on the page.
    rect = ClientRect(left=100, top=200, width=250, height=88)
    pad.begin((100 + 5, 200 + 5), rect)
    pad.extend((100 + 200, 200 + 5), rect)
    image = decode_image(pad.end()).convert("RGBA")
    assert image.getpixel((200, 10)) == INK
    assert image.getpixel((420, 10))[3] == 0


def test_mouse_and_touch_streams_render_identically():
    rect = ClientRect(left=0, top=0, width=500, height=176)
    mouse = [
        {"type": "mousedown", "clientX": 20, "clientY": 30},
        {"type": "mousemove", "clientX": 80, "clientY": 60},
        {"type": "mousemove", "clientX": 140, "clientY": 40},
        {"type": "click"},
        {"type": "mouseleave", "clientX": 500, "clientY": 0},
    ]
    touch = [
        {"type": "touchstart", "touches": [{"clientX": 20, "clientY": 30}]},
        {"type": "touchmove", "touches": [{"clientX": 80, "clientY": 60}]},
        {"type": "touchmove", "touches": [{"clientX": 140, "clientY": 40}]},
        {"type": "touchend", "touches": []},
    ]
    mouse_msgs = list(from_mouse_events(mouse))
    touch_msgs = list(from_touch_events(touch))
    assert [m.kind for m in mouse_msgs] == ["begin", "move", "move", "end"]
    assert [m.kind for m in touch_msgs] == ["begin", "move", "move", "end"]

    a = SignatureCapture().feed(mouse_msgs, rect)
    b = SignatureCapture().feed(touch_msgs, rect)
    assert a and a == b


def test_ink_persists_across_strokes_until_cleared():
    pad = SignatureCapture()
    pad.feed([PointerMessage("begin", 10, 10), PointerMessage("move", 60, 10), PointerMessage("end")])
    # A tap after real ink re-saves the same surface.
    pad.begin((200, 100))
    assert pad.end() is not None
    assert pad.has_ink
