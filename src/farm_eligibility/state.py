from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Farm:
    farm_id: str
    name: str
    size_ha: float


class FarmStore:
    """Application state for the signed-in user's farms.

    Lifecycle: `load()` after sign-in, `select()` on user choice, `clear()`
    on sign-out. Listeners are notified whenever the selection changes so
    dependent state (such as an eligibility check) can be reset.
    """

    def __init__(self, loader: Callable[[], Iterable[Farm]]) -> None:
        self._loader = loader
        self._farms: dict[str, Farm] = {}
        self._selected_id: str | None = None
        self._listeners: list[Callable[[Farm | None], None]] = []

    @property
    def farms(self) -> list[Farm]:
        return list(self._farms.values())

    @property
    def selected(self) -> Farm | None:
        if self._selected_id is None:
            return None
        return self._farms.get(self._selected_id)

    def on_selection_change(self, listener: Callable[[Farm | None], None]) -> None:
        self._listeners.append(listener)

    def _set_selected(self, farm_id: str | None) -> None:
        if farm_id == self._selected_id:
            return
        self._selected_id = farm_id
        selected = self.selected
        for listener in self._listeners:
            listener(selected)

    def load(self) -> list[Farm]:
        self._farms = {farm.farm_id: farm for farm in self._loader()}
        LOGGER.info("Loaded %d farms", len(self._farms))
        if self._selected_id not in self._farms:
            self._set_selected(next(iter(self._farms), None))
        return self.farms

    def select(self, farm_id: str) -> Farm:
        if farm_id not in self._farms:
            raise KeyError(f"Unknown farm id: {farm_id}")
        self._set_selected(farm_id)
        return self._farms[farm_id]

    def clear(self) -> None:
        self._farms = {}
        self._set_selected(None)
