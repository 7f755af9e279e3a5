"""Selection plan and run result models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from changelang.exceptions import ChangeLangError
from changelang.models.track import TrackType

CLEAR_SENTINEL = "0"


@dataclass(frozen=True)
class RunOptions:
    """Parsed command line for one file.

    ``audio`` and ``subtitle`` hold the raw directives; ``None`` means the
    flag was not given.
    """

    file_path: Path
    audio: Optional[str] = None
    subtitle: Optional[str] = None
    dry_run: bool = False

    @property
    def has_directives(self) -> bool:
        """True when any -a/-s directive was supplied."""
        return self.audio is not None or self.subtitle is not None


class ActionKind(Enum):
    """What to do with the default flags of one stream type."""

    NONE = "none"
    SET = "set"
    CLEAR = "clear"


@dataclass(frozen=True)
class TrackAction:
    """A planned change for one stream type."""

    kind: ActionKind = ActionKind.NONE
    ordinal: Optional[int] = None

    def __post_init__(self):
        if self.kind is ActionKind.SET and (self.ordinal is None or self.ordinal < 0):
            raise ValueError("SET action requires a non-negative ordinal")
        if self.kind is not ActionKind.SET and self.ordinal is not None:
            raise ValueError(f"{self.kind.value} action takes no ordinal")

    @classmethod
    def none(cls) -> "TrackAction":
        return cls(ActionKind.NONE)

    @classmethod
    def set_default(cls, ordinal: int) -> "TrackAction":
        return cls(ActionKind.SET, ordinal)

    @classmethod
    def clear(cls) -> "TrackAction":
        return cls(ActionKind.CLEAR)

    @property
    def pending(self) -> bool:
        """True when this action requires a rewrite."""
        return self.kind is not ActionKind.NONE

    def __str__(self) -> str:
        if self.kind is ActionKind.SET:
            return f"set track {self.ordinal + 1} as default"
        if self.kind is ActionKind.CLEAR:
            return "clear all default flags"
        return "no action"


@dataclass(frozen=True)
class SelectionPlan:
    """Planned actions for audio and subtitle streams of one file."""

    audio: TrackAction = field(default_factory=TrackAction.none)
    subtitle: TrackAction = field(default_factory=TrackAction.none)
    interactive: bool = False

    def __post_init__(self):
        if self.audio.kind is ActionKind.CLEAR:
            raise ValueError("Clearing default flags is only supported for subtitles")

    def action_for(self, track_type: TrackType) -> TrackAction:
        return self.audio if track_type is TrackType.AUDIO else self.subtitle

    def pending(self) -> list[tuple[TrackType, TrackAction]]:
        """Pending actions in execution order (audio first)."""
        return [
            (track_type, self.action_for(track_type))
            for track_type in (TrackType.AUDIO, TrackType.SUBTITLE)
            if self.action_for(track_type).pending
        ]

    @property
    def is_empty(self) -> bool:
        return not self.pending()


@dataclass
class RewriteOutcome:
    """Result of one rewrite pass."""

    track_type: TrackType
    action: TrackAction
    error: Optional[ChangeLangError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunResult:
    """Result of processing a single file."""

    status: Literal["success", "noop", "declined", "failed", "dry_run"]
    file_path: Optional[Path] = None
    plan: Optional[SelectionPlan] = None
    outcomes: list[RewriteOutcome] = field(default_factory=list)
    error: Optional[ChangeLangError] = None  # Fatal error before any rewrite

    @property
    def exit_code(self) -> int:
        """Process exit code: interactive no-op and any failure are 1."""
        return 1 if self.status in ("failed", "declined") else 0

    @property
    def errors(self) -> list[ChangeLangError]:
        """All errors in the order they occurred."""
        found = [self.error] if self.error else []
        found.extend(o.error for o in self.outcomes if o.error is not None)
        return found

    def __str__(self) -> str:
        """Human-readable representation."""
        name = self.file_path.name if self.file_path else "?"
        if self.status == "success":
            changes = ", ".join(f"{o.track_type.label}: {o.action}" for o in self.outcomes)
            return f"{name}: {changes}"
        elif self.status == "noop":
            return f"{name}: No matching tracks, file not changed"
        elif self.status == "declined":
            return f"{name}: No selection made, file not changed"
        elif self.status == "dry_run":
            changes = ", ".join(f"{a} ({t.label})" for t, a in self.plan.pending()) if self.plan else ""
            return f"{name}: Would {changes} (dry run)"
        else:
            message = "; ".join(e.message for e in self.errors) or "unknown error"
            return f"{name}: Failed ({message})"
