# records.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union


class EntityKind(Enum):
    COLLECTION = "collection"
    MEMBER = "member"


@dataclass(frozen=True)
class CollectionRecord:
    external_id: int
    url: str

    @property
    def kind(self) -> EntityKind:
        return EntityKind.COLLECTION


@dataclass(frozen=True)
class MemberRecord:
    external_id: int
    url: str

    @property
    def kind(self) -> EntityKind:
        return EntityKind.MEMBER


# Closed set of node payloads; dispatch on .kind or isinstance, never subclass further.
Record = Union[CollectionRecord, MemberRecord]
