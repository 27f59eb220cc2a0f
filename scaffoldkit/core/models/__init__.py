"""
Domain models — Pydantic types for the scaffolding engine.

All models are re-exported here for convenient access:

    from scaffoldkit.core.models import ActionFile, Generate, Receipt, Command
"""

from scaffoldkit.core.models.action import (
    Action,
    Attributes,
    Define,
    Exec,
    Generate,
    Inject,
    InjectMavenBuildPlugin,
    InjectMavenDependency,
    InjectMavenDependencyManagement,
    InjectMavenRepository,
    Options,
    Question,
    Receipt,
    Vars,
)
from scaffoldkit.core.models.action_file import ActionFile, Conditional, FrontMatter
from scaffoldkit.core.models.command import Command, CommandOption, NounEntry, VerbEntry
from scaffoldkit.core.models.settings import EngineSettings

__all__ = [
    # action.py
    "Action",
    "Attributes",
    "Define",
    "Exec",
    "Generate",
    "Inject",
    "InjectMavenBuildPlugin",
    "InjectMavenDependency",
    "InjectMavenDependencyManagement",
    "InjectMavenRepository",
    "Options",
    "Question",
    "Receipt",
    "Vars",
    # action_file.py
    "ActionFile",
    "Conditional",
    "FrontMatter",
    # command.py
    "Command",
    "CommandOption",
    "NounEntry",
    "VerbEntry",
    # settings.py
    "EngineSettings",
]
