from ws_proxy.models.frames import BinaryFrame, TextFrame
from ws_proxy.relay.buffer import PreOpenBuffer


def test_drain_is_fifo():
    buffer = PreOpenBuffer()
    frames = [TextFrame("1"), BinaryFrame(b"2"), TextFrame("3")]
    for frame in frames:
        buffer.append(frame)

    assert len(buffer) == 3
    assert list(buffer.drain()) == frames
    assert len(buffer) == 0
    assert not buffer
    assert buffer.total_buffered == 3
    buffer.append(TextFrame("4"))
    assert buffer.total_buffered == 4


def test_partial_drain_keeps_remaining_frames():
    buffer = PreOpenBuffer()
    for i in range(4):
        buffer.append(TextFrame(str(i)))

    drained = []
    for frame in buffer.drain():
        drained.append(frame)
        if len(drained) == 2:
            break

    assert drained == [TextFrame("0"), TextFrame("1")]
    assert len(buffer) == 2
    assert buffer.clear() == 2
    assert len(buffer) == 0
