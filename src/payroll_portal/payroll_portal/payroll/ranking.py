from __future__ import annotations

from typing import Iterable, Mapping, Sequence, TypeVar

from ..core.constants import DEFAULT_TEAM_ORDER

T = TypeVar("T")


class TeamRanking:
    """Explicit team -> rank table.

    Unknown teams share one sentinel rank greater than every defined rank, so
    they sort after all ranked teams and keep their relative order (``sorted``
    is stable).
    """

    def __init__(self, order: Sequence[str] = DEFAULT_TEAM_ORDER):
        self._ranks: dict[str, int] = {}
        for team_id in order:
            self._ranks.setdefault(str(team_id), len(self._ranks))
        self.unranked = len(self._ranks)

    @classmethod
    def from_setting(cls, value: str) -> "TeamRanking":
        order = [part.strip() for part in (value or "").split(",") if part.strip()]
        return cls(order or DEFAULT_TEAM_ORDER)

    @property
    def ranks(self) -> Mapping[str, int]:
        return dict(self._ranks)

    def rank(self, team_id: str) -> int:
        return self._ranks.get(str(team_id), self.unranked)

    def sort(self, items: Iterable[T], *, key=lambda item: item.team_id) -> list[T]:
        return sorted(items, key=lambda item: self.rank(key(item)))
