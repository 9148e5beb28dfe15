"""Unit tests for DocumentValidator."""

import pytest

from screenflow.core.errors import DocumentError
from screenflow.document.models import ModuleDocument
from screenflow.document.validators import DocumentValidator
from tests.factories import make_element, make_event, make_screen


def build(*screens, **overrides) -> ModuleDocument:
    # Bypass the loader so validation can be exercised directly
    return ModuleDocument.model_validate({"screens": list(screens), **overrides})


def test_valid_document_has_no_warnings():
    document = build(make_screen("a", events=[make_event("e1")]), make_screen("b"))
    assert DocumentValidator(document).validate() == []


def test_duplicate_screen_ids_rejected():
    document = build(make_screen("a"), make_screen("a"))

    with pytest.raises(DocumentError, match="Duplicate screen ids"):
        DocumentValidator(document).validate()


def test_unknown_initial_screen_rejected():
    document = build(make_screen("a"), initialScreen="missing")

    with pytest.raises(DocumentError, match="Initial screen 'missing'"):
        DocumentValidator(document).validate()


def test_cross_scope_duplicate_event_warns():
    """Test a screen event shadowing an element event is reported"""
    # Arrange
    document = build(
        make_screen(
            "a",
            events=[make_event("submit")],
            elements=[make_element(make_event("submit"))],
        )
    )

    # Act
    warnings = DocumentValidator(document).validate()

    # Assert
    assert len(warnings) == 1
    assert "screen-level events take precedence" in warnings[0]


def test_same_scope_duplicate_event_warns():
    document = build(
        make_screen(
            "a", elements=[make_element(make_event("tap")), make_element(make_event("tap"))]
        )
    )

    warnings = DocumentValidator(document).validate()

    assert len(warnings) == 1
    assert "duplicate element-level event ids ['tap']" in warnings[0]
