"""Tests for the event-stream decoder."""

import pytest

from netero.errors import StreamDecodeError
from netero.stream import decode_stream, frame_delta, iter_lines


def _frame(text):
    return (
        'data: {"choices":[{"delta":{"content":' + f'"{text}"' + "}}]}\n"
    ).encode()


def _collect(chunks):
    emitted = []
    text = decode_stream(chunks, emitted.append)
    return text, emitted


def test_basic_stream():
    text, emitted = _collect([_frame("Hel"), _frame("lo"), b"data: [DONE]\n"])
    assert text == "Hello"
    assert emitted == ["Hel", "lo"]


def test_frames_split_across_chunks():
    body = _frame("ab") + _frame("cd") + b"data: [DONE]\n"
    chunks = [body[i : i + 3] for i in range(0, len(body), 3)]
    text, emitted = _collect(chunks)
    assert text == "abcd"
    assert emitted == ["ab", "cd"]


def test_crlf_and_blank_lines():
    body = b"\r\n" + _frame("x").replace(b"\n", b"\r\n") + b"\r\ndata: [DONE]\r\n"
    assert _collect([body])[0] == "x"


def test_non_data_lines_ignored():
    body = b": keepalive\nevent: message\nid: 7\n" + _frame("y") + b"data: [DONE]\n"
    assert _collect([body]) == ("y", ["y"])


def test_done_stops_reading():
    body = _frame("a") + b"data: [DONE]\n" + _frame("ignored")
    assert _collect([body])[0] == "a"


def test_frames_without_content_skipped():
    body = (
        b'data: {"choices":[{"delta":{"role":"assistant"}}]}\n'
        b'data: {"choices":[{"delta":{"content":""}}]}\n'
        b'data: {"choices":[]}\n'
        + _frame("z")
        + b"data: [DONE]\n"
    )
    assert _collect([body]) == ("z", ["z"])


def test_eof_without_done_returns_text():
    assert _collect([_frame("partial")])[0] == "partial"


def test_malformed_frame_raises_after_earlier_emits():
    emitted = []
    body = _frame("kept") + b"data: {not json\n" + _frame("never")
    with pytest.raises(StreamDecodeError):
        decode_stream([body], emitted.append)
    assert emitted == ["kept"]


def test_emit_happens_before_next_chunk():
    seen = []

    def chunks():
        yield _frame("one")
        seen.append("pulled second chunk")
        yield _frame("two")
        yield b"data: [DONE]\n"

    decode_stream(chunks(), lambda d: seen.append(d))
    assert seen == ["one", "pulled second chunk", "two"]


def test_iter_lines_trailing_partial():
    assert list(iter_lines([b"a\nb", b"c"])) == ["a", "bc"]


def test_frame_delta_non_object():
    assert frame_delta("[1, 2]") is None
    assert frame_delta('{"choices":[{"delta":{"content":"q"}}]}') == "q"


@pytest.mark.parametrize(
    "payload",
    [
        '{"choices": 5}',
        '{"choices": {"a": 1}}',
        '{"choices": "text"}',
        '{"choices": [5]}',
        '{"choices": [{"delta": "x"}]}',
        '{"choices": [{"delta": {"content": 7}}]}',
    ],
)
def test_unexpected_frame_shapes_carry_no_delta(payload):
    assert frame_delta(payload) is None


def test_unexpected_shape_does_not_abort_stream():
    body = b'data: {"choices": 5}\n' + _frame("after") + b"data: [DONE]\n"
    assert _collect([body]) == ("after", ["after"])
