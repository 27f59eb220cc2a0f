"""
Action and Receipt models — the execution contract.

An action file declares exactly one Action. Actions form a closed
tagged union keyed by ``kind``; the orchestrator dispatches on the
concrete type. Handlers return Receipts describing what happened.

YAML field names are kebab-case (``overwrite``, ``command-file``,
``json-path``); snake_case is accepted too and unknown keys are ignored.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class _Spec(BaseModel):
    """Shared config for YAML-facing models."""

    model_config = ConfigDict(
        alias_generator=_kebab,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ── Supporting types ────────────────────────────────────────────────


class Define(_Spec):
    """Binds an exec result into the model under ``name``."""

    name: str
    json_path: str | None = None


class Attributes(_Spec):
    """Prompt presentation hints for a question."""

    default_value: Any = None
    mask_character: str | None = None
    multiple: bool = False
    confirmation: str | None = None


class Options(_Spec):
    """Where a dropdown question gets its choices.

    ``choices`` is a static list or label map; ``exec`` runs a command
    and reads the choices from its JSON output.
    """

    choices: list[Any] | dict[str, Any] | None = None
    exec: Exec | None = None


class Question(_Spec):
    """One interactive question of a ``vars`` action."""

    name: str
    label: str
    type: str = "input"
    options: Options | None = None
    attributes: Attributes = Field(default_factory=Attributes)


# ── Action variants ─────────────────────────────────────────────────


class Generate(_Spec):
    """Render a template into a new file."""

    kind: Literal["generate"] = "generate"
    to: str
    text: str | None = None
    from_: str | None = Field(default=None, alias="from")
    overwrite: bool = False


class Inject(_Spec):
    """Insert text before/after a marker line of an existing file."""

    kind: Literal["inject"] = "inject"
    to: str
    text: str | None = None
    skip: str | None = None
    before: str | None = None
    after: str | None = None


class Exec(_Spec):
    """Run an external shell command."""

    kind: Literal["exec"] = "exec"
    command: str | None = None
    command_file: str | None = None
    to: str | None = None
    errto: str | None = None
    dir: str | None = None
    json_path: str | None = None
    define: Define | None = None
    stdin: bool = Field(default=False, validation_alias=AliasChoices("in", "stdin"))
    timeout: float | None = None
    continue_on_error: bool = False

    @field_validator("define", mode="before")
    @classmethod
    def _define_shorthand(cls, value: Any) -> Any:
        # `define: project-id` is shorthand for `define: {name: project-id}`
        if isinstance(value, str):
            return {"name": value}
        return value


Options.model_rebuild()
Question.model_rebuild()


class Vars(_Spec):
    """Define model variables from literal data or interactive questions."""

    kind: Literal["vars"] = "vars"
    questions: list[Question] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    role: str | None = None

    @field_validator("data", mode="before")
    @classmethod
    def _data_mapping(cls, value: Any) -> Any:
        if value is None:
            return {}
        return value


class InjectMavenDependency(_Spec):
    kind: Literal["inject-maven-dependency"] = "inject-maven-dependency"
    to: str = "pom.xml"
    text: str | None = None


class InjectMavenDependencyManagement(_Spec):
    kind: Literal["inject-maven-dependency-management"] = "inject-maven-dependency-management"
    to: str = "pom.xml"
    text: str | None = None


class InjectMavenRepository(_Spec):
    kind: Literal["inject-maven-repository"] = "inject-maven-repository"
    to: str = "pom.xml"
    text: str | None = None
    id: str | None = None
    name: str | None = None
    url: str | None = None


class InjectMavenBuildPlugin(_Spec):
    kind: Literal["inject-maven-build-plugin"] = "inject-maven-build-plugin"
    to: str = "pom.xml"
    text: str | None = None
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None


Action = Annotated[
    Union[
        Generate,
        Inject,
        Exec,
        Vars,
        InjectMavenDependency,
        InjectMavenDependencyManagement,
        InjectMavenRepository,
        InjectMavenBuildPlugin,
    ],
    Field(discriminator="kind"),
]

MAVEN_ACTIONS = (
    InjectMavenDependency,
    InjectMavenDependencyManagement,
    InjectMavenRepository,
    InjectMavenBuildPlugin,
)

# YAML key → action kind. The short maven spellings are accepted as well.
ACTION_KINDS: dict[str, str] = {
    "generate": "generate",
    "inject": "inject",
    "exec": "exec",
    "vars": "vars",
    "inject-maven-dependency": "inject-maven-dependency",
    "inject-dependency": "inject-maven-dependency",
    "inject-maven-dependency-management": "inject-maven-dependency-management",
    "inject-dependency-management": "inject-maven-dependency-management",
    "inject-maven-repository": "inject-maven-repository",
    "inject-repository": "inject-maven-repository",
    "inject-maven-build-plugin": "inject-maven-build-plugin",
    "inject-build-plugin": "inject-maven-build-plugin",
    "inject-maven-plugin": "inject-maven-build-plugin",
}


# ── Receipt ─────────────────────────────────────────────────────────


class Receipt(BaseModel):
    """Result of executing one action file.

    ``status`` is the conclusion the run acts on. ``outcome`` is what
    actually happened; the two differ when an exec action with
    ``continue-on-error`` fails (outcome ``failed``, status ``ok``).
    """

    action: str
    action_file: str = ""
    status: Literal["ok", "skipped", "failed"] = "ok"
    outcome: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=now_iso)
    ended_at: str = Field(default_factory=now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)
    outputs: dict[str, Any] = Field(default_factory=dict)

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(cls, action: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        kwargs.setdefault("outcome", "ok")
        return cls(action=action, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, action: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(action=action, status="failed", outcome="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, action: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt."""
        return cls(action=action, status="skipped", outcome="skipped", output=reason, **kwargs)
