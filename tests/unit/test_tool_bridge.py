"""Unit tests for the tool bridge implementations."""

from screenflow.engine.bridge import BufferedToolBridge, ObserverToolBridge, ToolCall


def test_publish_reaches_listeners_in_order():
    # Arrange
    bridge = ObserverToolBridge()
    received = []
    bridge.subscribe(lambda call: received.append(("first", call.tool)))
    bridge.subscribe(lambda call: received.append(("second", call.tool)))

    # Act
    bridge.publish(ToolCall(tool="store_answer", params={"questionId": "q1"}))

    # Assert
    assert received == [("first", "store_answer"), ("second", "store_answer")]


def test_unsubscribe():
    bridge = ObserverToolBridge()
    received = []
    unsubscribe = bridge.subscribe(received.append)

    unsubscribe()
    unsubscribe()
    bridge.publish(ToolCall(tool="x"))

    assert received == []
    assert bridge.listener_count == 0


def test_listener_error_isolated():
    """Test a failing listener does not stop later listeners or the publisher"""
    bridge = ObserverToolBridge()
    received = []

    def broken(call):
        raise RuntimeError("listener down")

    bridge.subscribe(broken)
    bridge.subscribe(received.append)

    bridge.publish(ToolCall(tool="x"))

    assert [c.tool for c in received] == ["x"]


def test_publish_without_listeners():
    ObserverToolBridge().publish(ToolCall(tool="nobody_listens"))


def test_buffered_bridge_records_calls():
    bridge = BufferedToolBridge()
    received = []
    bridge.subscribe(received.append)

    bridge.publish(ToolCall(tool="a"))
    bridge.publish(ToolCall(tool="b", event_id="e1"))

    assert [c.tool for c in bridge.calls] == ["a", "b"]
    assert received == bridge.calls
    bridge.clear()
    assert bridge.calls == []
