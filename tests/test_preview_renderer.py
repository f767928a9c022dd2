from __future__ import annotations

from dash import html

from photo_uploader.app import ids
from photo_uploader.app.preview import PreviewRenderer

from .conftest import make_blob


def _remove_button(figure: html.Figure) -> html.Button:
    return figure.children[1]


def test_empty_selection_renders_nothing(store):
    assert PreviewRenderer(store).render() == []


def test_one_thumbnail_per_item_in_selection_order(store):
    store.add_files([make_blob("a.jpg"), make_blob("b.jpg"), make_blob("c.jpg")])

    thumbs = PreviewRenderer(store).render()

    assert len(thumbs) == 3
    for figure, item in zip(thumbs, store.items):
        image = figure.children[0]
        assert image.src == item.preview.url
        assert _remove_button(figure).id == {"type": ids.THUMB_REMOVE, "key": item.key}


def test_remove_then_render_drops_the_item(store):
    store.add_files([make_blob("a.jpg"), make_blob("b.jpg")])
    renderer = PreviewRenderer(store)
    removed_key = store.first().key

    store.remove_one(removed_key)
    thumbs = renderer.render()

    assert len(thumbs) == len(store) == 1
    assert removed_key not in [entry.key for entry in renderer.entries()]


def test_activate_removes_through_the_store(store, previews):
    store.add_files([make_blob("a.jpg"), make_blob("b.jpg")])
    renderer = PreviewRenderer(store)
    key = store.items[1].key

    assert renderer.activate(key) is True
    assert key not in store
    assert len(previews) == 1
    assert renderer.activate(key) is False
