"""
Command models — the manifest of a noun or verb directory.

A ``command.yaml`` in a noun or verb directory describes the command
and the options it accepts::

    command:
      description: Create a new controller
      options:
        - name: feature
          description: Name of the feature
          data-type: string
          required: true
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from scaffoldkit.core.models.action import _kebab

DATA_TYPES = ("string", "int", "integer", "float", "bool", "boolean")


class CommandOption(BaseModel):
    """One option accepted by a command (``--name value``)."""

    model_config = ConfigDict(alias_generator=_kebab, populate_by_name=True, extra="ignore")

    name: str
    description: str = ""
    data_type: str = "string"
    default_value: Any = None
    required: bool = False
    input_type: str | None = None
    choices: dict[str, str] = Field(default_factory=dict)
    param_label: str | None = None


class Command(BaseModel):
    """A noun or verb as presented to the user."""

    model_config = ConfigDict(alias_generator=_kebab, populate_by_name=True, extra="ignore")

    name: str = ""
    description: str = ""
    help: str = ""
    options: list[CommandOption] = Field(default_factory=list)

    def get_option(self, name: str) -> CommandOption | None:
        """Get an option by name."""
        for option in self.options:
            if option.name == name:
                return option
        return None


class VerbEntry(BaseModel):
    """A resolved verb directory with its manifest."""

    command: Command
    path: str


class NounEntry(BaseModel):
    """A resolved noun directory and its verbs."""

    command: Command
    path: str
    verbs: list[VerbEntry] = Field(default_factory=list)

    def get_verb(self, name: str) -> VerbEntry | None:
        for verb in self.verbs:
            if verb.command.name == name or verb.path.rsplit("/", 1)[-1] == name:
                return verb
        return None
