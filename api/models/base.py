import enum
from datetime import datetime, timezone

from sqlalchemy import Enum
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    # Persist enum values ("pending"), not member names ("PENDING")
    return Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])
