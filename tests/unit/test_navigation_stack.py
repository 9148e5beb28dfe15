"""Unit tests for NavigationStack."""

from screenflow.navigation.stack import NavigationStack


def test_new_stack_is_empty():
    stack = NavigationStack()
    assert stack.current is None
    assert len(stack) == 0
    assert stack.can_go_back is False


def test_push_sets_current():
    """Test the top entry is the current screen"""
    # Arrange
    stack = NavigationStack()

    # Act
    stack.push("welcome")
    stack.push("question")

    # Assert
    assert stack.current == "question"
    assert stack.history == ["welcome", "question"]
    assert stack.can_go_back is True


def test_pop_returns_new_current():
    stack = NavigationStack(["welcome", "question", "summary"])

    assert stack.pop() == "question"
    assert stack.history == ["welcome", "question"]


def test_pop_never_empties_stack():
    """Test popping the first activated screen is a no-op"""
    # Arrange
    stack = NavigationStack(["welcome"])

    # Act
    result = stack.pop()
    result_again = stack.pop()

    # Assert
    assert result == "welcome"
    assert result_again == "welcome"
    assert stack.history == ["welcome"]


def test_pop_on_empty_stack():
    assert NavigationStack().pop() is None


def test_history_is_a_copy():
    stack = NavigationStack(["welcome"])
    stack.history.append("tampered")
    assert stack.history == ["welcome"]


def test_revisiting_a_screen_pushes_again():
    """Test the stack records every visit, including repeats"""
    stack = NavigationStack()
    for screen_id in ("a", "b", "a"):
        stack.push(screen_id)
    assert stack.history == ["a", "b", "a"]


def test_clear():
    stack = NavigationStack(["a", "b"])
    stack.clear()
    assert len(stack) == 0
    assert repr(stack) == "NavigationStack([])"
