from __future__ import annotations

"""Single-flight processing status values."""

from dataclasses import dataclass
from typing import Union

from .operations import OperationDescriptor


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Requesting:
    descriptor: OperationDescriptor


@dataclass(frozen=True)
class Failed:
    message: str
    descriptor: OperationDescriptor

    def __post_init__(self) -> None:
        if not str(self.message or "").strip():
            raise ValueError("Failed status requires a message.")


ProcessingStatus = Union[Idle, Requesting, Failed]

IDLE = Idle()


__all__ = ["Failed", "IDLE", "Idle", "ProcessingStatus", "Requesting"]
