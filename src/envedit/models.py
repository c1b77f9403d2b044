"""Domain models."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from pydantic import BaseModel, Field

from envedit.domain.ordered_map import OrderedMap


class DiffOpKind(Enum):
    ADD = auto()
    REMOVE = auto()


@dataclass(frozen=True)
class DiffOp:
    """A single step of a diff between two ordered maps.

    - ADD upserts ``key`` with ``value``.
    - REMOVE drops ``key``; ``value`` is always None.
    """

    kind: DiffOpKind
    key: str
    value: str | None = None

    @classmethod
    def add(cls, key: str, value: str) -> "DiffOp":
        return cls(kind=DiffOpKind.ADD, key=key, value=value)

    @classmethod
    def remove(cls, key: str) -> "DiffOp":
        return cls(kind=DiffOpKind.REMOVE, key=key)


class IndexState(Enum):
    """Tracking state of one slot of an edit session."""

    CLEAN = auto()
    DIRTY = auto()
    DELETED = auto()


class Release(BaseModel):
    """A release record as delivered by the controller.

    Only ``env`` is edited; every other field is carried over verbatim when a
    new release is built.
    """

    name: str = ""
    artifacts: list[str] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    processes: dict[str, Any] = Field(default_factory=dict)
    env: list[tuple[str, str]] = Field(default_factory=list)

    def env_map(self) -> OrderedMap:
        return OrderedMap.from_pairs(self.env)
