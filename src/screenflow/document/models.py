"""Document models for screen modules.

Every optional field is materialized to a concrete default here, at load
time, so the runtime never has to default anything itself. Wire keys are
camelCase (``serviceName``, ``onSuccess``); Python attributes are
snake_case and either form is accepted on input.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from screenflow.config.settings import EngineSettings
from screenflow.core.errors import RuleError
from screenflow.core.logic import validate_rule
from screenflow.core.types import StateScope

# Document version constants
SUPPORTED_VERSIONS = frozenset({"1.0"})
CURRENT_VERSION = "1.0"

SectionPosition = Literal["fixed-top", "body", "fixed-bottom"]
SectionLayout = Literal["stack", "grid"]
SectionDirection = Literal["vertical", "horizontal"]


class DocumentModel(BaseModel):
    """Base model: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class EventConditions(DocumentModel):
    """A JSON Logic rule plus the variables it reads.

    Variable values are literals or ``$moduleData.<path>`` /
    ``$screenData.<path>`` references.
    """

    rules: Any = Field(description="JSON Logic expression tree")
    state: dict[str, Any] = Field(default_factory=dict, description="Named variable bindings")

    @field_validator("rules")
    @classmethod
    def _check_rules(cls, value: Any) -> Any:
        try:
            validate_rule(value)
        except RuleError as e:
            raise ValueError(str(e)) from e
        return value


class ResponseMapping(DocumentModel):
    """Where a service response is written in state."""

    state_key: str = Field(description="State key receiving the response")
    scope: StateScope = Field(default=StateScope.screen, description="Target scope")
    transformation: str | None = Field(
        default=None, description="Dotted path into the response to extract"
    )


class BaseAction(DocumentModel):
    """Fields shared by every action variant."""

    conditions: list[EventConditions] = Field(
        default_factory=list, description="Action-level conditions"
    )


class NavigationAction(BaseAction):
    """Navigate to the screen named by a deeplink."""

    type: Literal["navigation"] = "navigation"
    deeplink: str = Field(description="Target URL or bare screen id")


class StateUpdateAction(BaseAction):
    """Shallow-merge values into a state scope."""

    type: Literal["stateUpdate"] = "stateUpdate"
    scope: StateScope = Field(default=StateScope.screen, description="Target scope")
    updates: dict[str, Any] = Field(description="Top-level keys to overwrite")


class ToolCallAction(BaseAction):
    """Publish a tool call to the voice/tool layer."""

    type: Literal["toolCall"] = "toolCall"
    tool: str = Field(description="Tool name")
    params: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class ServiceCallAction(BaseAction):
    """Call a host-wired service and map its response into state."""

    type: Literal["serviceCall"] = "serviceCall"
    service_name: str = Field(description="Service identifier")
    function_name: str = Field(description="Function within the service")
    parameters: dict[str, Any] = Field(default_factory=dict)
    response_mapping: ResponseMapping | None = None
    on_success: list["EventAction"] = Field(default_factory=list)
    on_error: list["EventAction"] = Field(default_factory=list)


class CloseModuleAction(BaseAction):
    """Ask the host to end the module."""

    type: Literal["closeModule"] = "closeModule"
    flow_completed: bool = False
    parameters: dict[str, Any] = Field(default_factory=dict)


class CustomAction(BaseAction):
    """Host-defined action, surfaced as a signal."""

    type: Literal["custom"] = "custom"
    name: str = Field(description="Custom action name")
    parameters: dict[str, Any] = Field(default_factory=dict)


EventAction = Annotated[
    NavigationAction
    | StateUpdateAction
    | ToolCallAction
    | ServiceCallAction
    | CloseModuleAction
    | CustomAction,
    Field(discriminator="type"),
]

ServiceCallAction.model_rebuild()


class ScreenEvent(DocumentModel):
    """A named, conditionally gated list of actions."""

    id: str = Field(description="Event identifier")
    type: str = Field(default="custom", description="Trigger type tag (bookkeeping only)")
    conditions: list[EventConditions] = Field(default_factory=list)
    actions: list[EventAction] = Field(default_factory=list, alias="action")
    analytics_name: str | None = None


class Element(DocumentModel):
    """A renderable element. Only its events matter to the engine."""

    type: str = Field(description="Element type tag")
    state: dict[str, Any] = Field(default_factory=dict)
    style: dict[str, Any] = Field(default_factory=dict)
    events: list[ScreenEvent] = Field(default_factory=list)
    conditions: list[EventConditions] = Field(default_factory=list)
    analytics_properties: dict[str, Any] = Field(default_factory=dict)


class Section(DocumentModel):
    """Structural container for elements."""

    id: str
    position: SectionPosition = "body"
    title: str | None = None
    layout: SectionLayout = "stack"
    direction: SectionDirection = "vertical"
    scrollable: bool = False
    elements: list[Element] = Field(default_factory=list)


class Screen(DocumentModel):
    """A complete screen definition."""

    id: str = Field(description="Screen identifier, unique within a document")
    title: str = ""
    hides_back_button: bool = False
    state: dict[str, Any] = Field(default_factory=dict, description="Initial screen state")
    analytics_properties: dict[str, Any] = Field(default_factory=dict)
    sections: list[Section] = Field(default_factory=list)
    events: list[ScreenEvent] = Field(default_factory=list)

    def element_events(self) -> list[ScreenEvent]:
        """All element events, in section order then element order."""
        return [
            event
            for section in self.sections
            for element in section.elements
            for event in element.events
        ]


class ModuleDocument(DocumentModel):
    """Root document: a module made of screens."""

    id: str = "module"
    version: str = Field(default=CURRENT_VERSION, description="Document version")
    state: dict[str, Any] = Field(default_factory=dict, description="Initial module state")
    initial_screen: str | None = None
    screens: list[Screen] = Field(default_factory=list)
    settings: EngineSettings = Field(default_factory=EngineSettings)

    @field_validator("version", mode="before")
    @classmethod
    def _check_version(cls, value: Any) -> str:
        # YAML reads an unquoted 1.0 as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if value not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported document version: {value}. "
                f"Supported: {', '.join(sorted(SUPPORTED_VERSIONS))}"
            )
        return value

    def get_screen(self, screen_id: str) -> Screen | None:
        """Find a screen by id."""
        for screen in self.screens:
            if screen.id == screen_id:
                return screen
        return None

    @property
    def start_screen_id(self) -> str | None:
        """Declared initial screen, else the first screen."""
        if self.initial_screen:
            return self.initial_screen
        return self.screens[0].id if self.screens else None
