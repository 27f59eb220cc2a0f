"""
Engine settings — optional per-project overrides in ``.spring/engine.yml``.

    commands-dir: .spring/commands
    exec-timeout: 300
    default-role: ""
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from scaffoldkit.core.models.action import _kebab


class EngineSettings(BaseModel):
    """Tunables for one project."""

    model_config = ConfigDict(alias_generator=_kebab, populate_by_name=True, extra="ignore")

    commands_dir: str = ".spring/commands"
    exec_timeout: float = Field(default=300, gt=0)
    default_role: str = ""
