from __future__ import annotations

import io

import pytest

from ubvff.entities import Color, Cubic, Point
from ubvff.errors import EmitterStateError, FormatValidationError
from ubvff.geometry import TYPE1_SCALE, TYPE2_SCALE
from ubvff.svg import (
    SVG_OPEN_TAIL,
    TYPE1_PROFILE,
    TYPE2_PROFILE,
    VIEWBOX_OFFSET,
    VIEWBOX_PLACEHOLDER,
    VIEWBOX_WIDTH,
    EmitterState,
    SvgEmitter,
    patch_viewbox,
    placeholder_open_tag,
)


def test_placeholder_sits_at_fixed_offset():
    tag = placeholder_open_tag()
    assert tag[VIEWBOX_OFFSET : VIEWBOX_OFFSET + VIEWBOX_WIDTH] == VIEWBOX_PLACEHOLDER
    assert VIEWBOX_OFFSET == 13
    assert VIEWBOX_WIDTH == 26
    assert tag.endswith(SVG_OPEN_TAIL[1:])


@pytest.mark.parametrize(
    "profile, steps, operation",
    [
        (TYPE1_PROFILE, [], "start_path"),
        (TYPE1_PROFILE, ["header"], "start_path"),
        (TYPE1_PROFILE, ["header", "start_layer"], "close_path"),
        (TYPE1_PROFILE, ["header", "start_layer"], "footer"),
        (TYPE2_PROFILE, [], "footer"),
        (TYPE2_PROFILE, ["header"], "line"),
        (TYPE2_PROFILE, ["header"], "start_layer"),
        (TYPE2_PROFILE, ["header"], "header"),
    ],
)
def test_illegal_transitions_write_nothing(profile, steps, operation):
    sink = io.BytesIO()
    emitter = SvgEmitter(sink, profile)
    for step in steps:
        getattr(emitter, step)()
    written = sink.getvalue()
    state = emitter.state
    with pytest.raises(EmitterStateError) as excinfo:
        if operation in ("start_path", "line"):
            getattr(emitter, operation)(Point(0, 0))
        else:
            getattr(emitter, operation)()
    assert sink.getvalue() == written
    assert emitter.state == state
    assert excinfo.value.state == state
    assert str(excinfo.value) == f"state error : in {operation}: {state.name}"


def test_close_directly_after_move_is_type2_only():
    t2 = SvgEmitter(io.BytesIO(), TYPE2_PROFILE)
    t2.header()
    t2.start_path(Point(0, 0))
    t2.close_path()
    assert t2.state == EmitterState.AFTER_CLOSE_PATH

    t1 = SvgEmitter(io.BytesIO(), TYPE1_PROFILE)
    t1.header(TYPE1_SCALE, TYPE1_SCALE)
    t1.start_layer()
    t1.start_path(Point(0, 0))
    with pytest.raises(EmitterStateError):
        t1.close_path()


def test_type1_document_text():
    sink = io.BytesIO()
    emitter = SvgEmitter(sink, TYPE1_PROFILE)
    s = TYPE1_SCALE
    emitter.header(4 * s, 3 * s)
    emitter.start_layer()
    emitter.start_path(Point(0, 0))
    emitter.cubic(Cubic((Point(s, 0), Point(s, s), Point(0, s))))
    emitter.close_path()
    emitter.start_path(Point(2 * s, 2 * s))
    emitter.line(Point(3 * s, 2 * s))
    emitter.end_path(None, Color(1, 2, 3), s // 2)
    emitter.end_layer()
    emitter.footer()
    assert emitter.finished
    assert sink.getvalue().decode("ascii") == (
        '<svg viewBox="0 0 4 3" version="1.1" baseProfile="full" xmlns="http://www.w3.org/2000/svg">\n'
        "<g>\n"
        '<path d="M 0.000000 0.000000 '
        "C 1.000000 0.000000, 1.000000 1.000000, 0.000000 1.000000 Z "
        "M 2.000000 2.000000 L 3.000000 2.000000 "
        '" fill="none" stroke="rgb(1,2,3)" stroke-width="0.500000" '
        'stroke-linecap="butt" stroke-linejoin="miter" stroke-miterlimit="10" />\n'
        "</g>\n"
        "</svg>\n"
    )


def test_type2_viewbox_is_patched_in_place():
    sink = io.BytesIO()
    emitter = SvgEmitter(sink, TYPE2_PROFILE)
    s = TYPE2_SCALE
    emitter.header()
    emitter.start_path(Point(0, 0))
    emitter.line(Point(s, s))
    emitter.end_path(Color(9, 8, 7), None, s)
    emitter.footer()
    before = len(sink.getvalue())
    emitter.set_viewbox((-s, 0, 12 * s, 7 * s))
    text = sink.getvalue().decode("ascii")
    assert len(text) == before
    assert text.startswith('<svg viewBox="-1 0 12 7"' + " " * 15 + ' version="1.1"')
    assert text.endswith('" fill="rgb(9,8,7)" stroke="none" />\n</svg>\n')


def test_type1_rejects_viewbox_patch():
    emitter = SvgEmitter(io.BytesIO(), TYPE1_PROFILE)
    with pytest.raises(FormatValidationError):
        emitter.set_viewbox((0, 0, 1, 1))


def test_patch_viewbox_keeps_length_and_position():
    sink = io.BytesIO(placeholder_open_tag().encode("ascii") + b"<g>\n")
    sink.seek(0, 2)
    end = sink.tell()
    patch_viewbox(sink, (1, 2, 3, 4))
    assert sink.tell() == end
    data = sink.getvalue()
    assert len(data) == end
    assert data[VIEWBOX_OFFSET : VIEWBOX_OFFSET + VIEWBOX_WIDTH] == b'"1 2 3 4"'.ljust(VIEWBOX_WIDTH)


def test_patch_viewbox_rejects_oversized_text():
    sink = io.BytesIO(placeholder_open_tag().encode("ascii"))
    with pytest.raises(FormatValidationError):
        patch_viewbox(sink, (-100000, -100000, 100000, 100000))
