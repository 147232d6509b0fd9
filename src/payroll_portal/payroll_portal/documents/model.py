from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time copy of one stored document.

    ``data`` is None when no document exists at ``(collection, doc_id)``.
    """

    collection: str
    doc_id: str
    data: Optional[dict[str, Any]] = field(default=None)

    @property
    def exists(self) -> bool:
        return self.data is not None
