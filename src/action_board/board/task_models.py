# src/action_board/board/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum


class ControlKind(StrEnum):
    """How a task is presented (affordance only, no business logic)."""

    CHECKBOX = "checkbox"
    TRIGGERABLE = "triggerable"

    @classmethod
    def parse(cls, raw: object) -> ControlKind | None:
        try:
            return cls(str(raw))
        except ValueError:
            return None


class TaskBehavior(StrEnum):
    """What activating a task does."""

    TOGGLE = "toggle"
    NAVIGATE_AND_COMPLETE = "navigate_and_complete"
    AI_PRIORITIZE = "ai_prioritize"

    @classmethod
    def parse(cls, raw: object) -> TaskBehavior | None:
        try:
            return cls(str(raw))
        except ValueError:
            return None


class SoundTrigger(StrEnum):
    CHECKBOX = "checkbox"
    TRIGGER = "trigger"
    CELEBRATION = "celebration"


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    label: str
    control_kind: ControlKind
    behavior: TaskBehavior
    completed: bool = False

    def with_completed(self, completed: bool) -> Task:
        return replace(self, completed=completed)


TaskCollection = tuple[Task, ...]


@dataclass(frozen=True, slots=True)
class SoundPreferences:
    """Trigger name -> opaque sound id. Unset triggers stay silent."""

    sounds: Mapping[str, str] = field(default_factory=dict)

    def sound_for(self, trigger: SoundTrigger | str) -> str | None:
        return self.sounds.get(str(trigger))

    def with_sound(self, trigger: SoundTrigger | str, sound_id: str | None) -> SoundPreferences:
        updated = dict(self.sounds)
        if sound_id:
            updated[str(trigger)] = sound_id
        else:
            updated.pop(str(trigger), None)
        return SoundPreferences(sounds=updated)


@dataclass(frozen=True, slots=True)
class PrioritizationReport:
    """Advisory AI output; shown to the user, never applied to the collection."""

    ordered_labels: tuple[str, ...]
    reasoning: str


DEFAULT_TASKS: TaskCollection = (
    Task(1, "Review project requirements", ControlKind.CHECKBOX, TaskBehavior.TOGGLE),
    Task(2, "Set up development environment", ControlKind.CHECKBOX, TaskBehavior.TOGGLE),
    Task(3, "Prioritize remaining tasks", ControlKind.TRIGGERABLE, TaskBehavior.AI_PRIORITIZE),
    Task(4, "Initiate final review", ControlKind.TRIGGERABLE, TaskBehavior.NAVIGATE_AND_COMPLETE),
)


def fresh_collection(defaults: TaskCollection) -> TaskCollection:
    """Copy of the default configuration with every task incomplete."""
    return tuple(t.with_completed(False) for t in defaults)


def has_unique_ids(tasks: TaskCollection) -> bool:
    ids = [t.id for t in tasks]
    return len(ids) == len(set(ids))
