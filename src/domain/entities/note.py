"""Note domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Note:
    """Domain entity for a note (content record).

    Notes are authored elsewhere; the console only reads them.
    """

    user_id: UUID
    title: str = ""
    content: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
