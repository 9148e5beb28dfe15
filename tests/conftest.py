"""Shared fixtures for screenflow tests.

The quiz document mirrors a typical voice-plus-screen module: a welcome
screen, a question with a gated submit event, and a summary screen that
closes the module.
"""

import logging
from pathlib import Path

import pytest

from screenflow.core.state import StateStore
from screenflow.document.models import ModuleDocument
from screenflow.engine.bridge import BufferedToolBridge
from screenflow.engine.registry import ServiceRegistry
from screenflow.engine.session import ScreenSession
from tests.factories import (
    cond,
    make_document,
    make_element,
    make_event,
    make_screen,
    nav,
    tool,
    update,
)

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples"


def _store_selected(option: str) -> dict:
    """store_answer for one option, gated on it being the selected one."""
    action = tool("store_answer", questionId="q1", answer=option)
    action["conditions"] = [
        cond({"==": [{"var": "selected"}, option]}, selected="$screenData.selectedOption")
    ]
    return action


@pytest.fixture
def onboarding_path() -> Path:
    """Path to the onboarding example document."""
    return EXAMPLES_DIR / "onboarding" / "module.yaml"


@pytest.fixture
def store() -> StateStore:
    """StateStore with a little data in both scopes."""
    return StateStore(
        screen_state={"selected": "a", "count": 2},
        module_state={"user": {"name": "Ana", "age": 30}, "flag": True},
    )


@pytest.fixture
def quiz_document() -> ModuleDocument:
    """Three-screen quiz: welcome -> question -> summary."""
    return make_document(
        make_screen(
            "welcome",
            elements=[
                make_element(
                    make_event("continue_event", nav("https://links.example.com/quiz/question"))
                )
            ],
        ),
        make_screen(
            "question",
            state={"selectedOption": None},
            events=[
                make_event("pick_yes", update({"selectedOption": "yes"})),
            ],
            elements=[
                make_element(
                    make_event(
                        "submit_answer",
                        _store_selected("yes"),
                        _store_selected("no"),
                        nav("summary"),
                        conditions=[
                            cond(
                                {"!!": [{"var": "selected"}]},
                                selected="$screenData.selectedOption",
                            )
                        ],
                    )
                )
            ],
        ),
        make_screen(
            "summary",
            events=[
                make_event(
                    "finish",
                    tool("complete_quiz"),
                    {"type": "closeModule", "flowCompleted": True},
                )
            ],
        ),
        state={"userName": "Ana"},
    )


@pytest.fixture
def bridge() -> BufferedToolBridge:
    return BufferedToolBridge()


@pytest.fixture
def services() -> ServiceRegistry:
    return ServiceRegistry()


@pytest.fixture
def session(quiz_document, bridge, services) -> ScreenSession:
    """Activated session on the quiz document's first screen."""
    session = ScreenSession(quiz_document, bridge=bridge, services=services, session_id="test")
    session.activate()
    return session


@pytest.fixture
def reset_screenflow_logging():
    """Undo setup_logging so later tests see default logger wiring."""
    yield
    logger = logging.getLogger("screenflow")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
