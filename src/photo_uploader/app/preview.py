"""Thumbnail projection of the current selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from dash import html
from dash.development.base_component import Component

from ..client.selection import SelectionStore
from . import ids


@dataclass(frozen=True)
class ThumbEntry:
    key: str
    url: str
    name: str


class PreviewRenderer:
    """Redraws one thumbnail per selected item, in selection order.

    The renderer keeps no state of its own. Its removal controls carry the
    item's identity key, and ``activate`` hands that key to the store.
    """

    def __init__(self, store: SelectionStore) -> None:
        self.store = store

    def entries(self) -> List[ThumbEntry]:
        return [ThumbEntry(key=item.key, url=item.preview.url, name=item.file.name) for item in self.store]

    def render(self) -> List[Component]:
        return [self._thumb(entry) for entry in self.entries()]

    def activate(self, key: str) -> bool:
        return self.store.remove_one(key)

    @staticmethod
    def _thumb(entry: ThumbEntry) -> Component:
        return html.Figure(
            [
                html.Img(src=entry.url, alt="Selected photo", title=entry.name),
                html.Button(
                    "×",
                    id={"type": ids.THUMB_REMOVE, "key": entry.key},
                    n_clicks=0,
                    className="thumb-remove",
                    **{"aria-label": "Remove this photo"},
                ),
            ],
            className="thumb",
            **{"data-key": entry.key},
        )
