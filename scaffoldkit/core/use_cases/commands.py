"""
Commands use case — list the nouns and verbs a project defines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from scaffoldkit.core.config.command_loader import scan_commands
from scaffoldkit.core.config.loader import find_project_root, load_settings
from scaffoldkit.core.errors import ScaffoldError
from scaffoldkit.core.models.command import NounEntry


@dataclass
class CommandsResult:
    """Scanned commands of a project."""

    project_root: Path | None = None
    commands_dir: Path | None = None
    nouns: list[NounEntry] = field(default_factory=list)
    error: str | None = None

    @property
    def verb_count(self) -> int:
        return sum(len(n.verbs) for n in self.nouns)

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["project_root"] = str(self.project_root)
        result["commands_dir"] = str(self.commands_dir)
        result["commands"] = [
            {
                "name": noun.command.name,
                "description": noun.command.description,
                "verbs": [
                    {
                        "name": verb.command.name,
                        "description": verb.command.description,
                        "options": [
                            o.model_dump(mode="json", by_alias=True, exclude_none=True)
                            for o in verb.command.options
                        ],
                    }
                    for verb in noun.verbs
                ],
            }
            for noun in self.nouns
        ]
        return result


def list_commands(project_dir: Path | None = None) -> CommandsResult:
    """Scan the commands directory of the project containing ``project_dir``."""
    result = CommandsResult()
    try:
        project_root = find_project_root(project_dir)
        result.project_root = project_root
        settings = load_settings(project_root)
        result.commands_dir = project_root / settings.commands_dir
        result.nouns = scan_commands(result.commands_dir)
    except ScaffoldError as e:
        result.error = str(e)
    return result
