"""Settings configuration models.

Engine behaviour knobs read from a document's ``settings`` section, and
server settings read from the environment.
"""

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# What to do with a trigger that arrives while a dispatch is in flight
TriggerPolicy = Literal["queue", "drop"]


class BuiltinToolsConfig(BaseModel):
    """Names of tools with inline side effects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    store_answer: str = Field(default="store_answer", description="Records an answer")
    complete: str = Field(default="complete_quiz", description="Sets the completion flag")


class EngineSettings(BaseModel):
    """Runtime settings for the screen interaction engine.

    Read from the document's ``settings`` section; keys are camelCase
    there (``triggerPolicy``) and snake_case in Python.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    trigger_policy: TriggerPolicy = Field(
        default="queue",
        description=(
            "Handling of triggers that arrive mid-dispatch: "
            "'queue' = run after the current dispatch, 'drop' = discard"
        ),
    )
    max_queued_triggers: int = Field(default=32, ge=1, description="Pending trigger limit")
    builtin_tools: BuiltinToolsConfig = Field(default_factory=BuiltinToolsConfig)
    gesture_tools: list[str] = Field(
        default_factory=lambda: ["enable_voice"],
        description="Tools that must run on the originating user-gesture call stack",
    )
    answer_key_prefix: str = Field(default="answer_", description="Module key prefix for answers")
    completion_flag: str = Field(default="quizCompleted", description="Module completion key")
    log_level: str = Field(default="INFO", description="Log level for the screenflow logger")


class ServerSettings(BaseModel):
    """HTTP host settings."""

    document_path: str | None = Field(default=None, description="Document loaded at startup")
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """Build settings from SCREENFLOW_* environment variables.

        A ``.env`` file in the working directory is loaded first.
        """
        from dotenv import load_dotenv

        load_dotenv()

        return cls(
            document_path=os.environ.get("SCREENFLOW_DOCUMENT_PATH"),
            host=os.environ.get("SCREENFLOW_HOST", "0.0.0.0"),
            port=int(os.environ.get("SCREENFLOW_PORT", "8000")),
            log_level=os.environ.get("SCREENFLOW_LOG_LEVEL", "INFO"),
        )
