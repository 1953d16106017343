from __future__ import annotations

import pytest

pytest.importorskip("fitz")

from inkstamp.core.annotations import AnnotationManager, SignatureAnnotation, TextAnnotation


@pytest.fixture()
def manager() -> AnnotationManager:
    return AnnotationManager(page_count=3)


def _signature(page: int = 1, x: float = 0, y: float = 0) -> SignatureAnnotation:
    return SignatureAnnotation(page=page, x=x, y=y, width=100, height=50,
                               stroke_paths=(((0.0, 0.0), (10.0, 10.0)),))


def test_add_assigns_unique_ids_and_records_history(manager: AnnotationManager) -> None:
    first = manager.add(TextAnnotation(page=1, x=10, y=10))
    second = manager.add(TextAnnotation(page=1, x=20, y=20))

    assert first.id and second.id and first.id != second.id
    assert manager.get_annotation_count() == 2
    assert manager.history_index == 2
    assert manager.can_undo()


def test_add_rejects_page_outside_document(manager: AnnotationManager) -> None:
    with pytest.raises(ValueError):
        manager.add(TextAnnotation(page=4, x=0, y=0))
    assert manager.get_annotation_count() == 0


def test_undo_with_nothing_to_undo_changes_nothing(manager: AnnotationManager) -> None:
    assert not manager.undo()
    assert manager.annotations == []
    assert manager.history_index == 0


def test_undo_then_new_action_drops_redo(manager: AnnotationManager) -> None:
    a = manager.add(TextAnnotation(page=1, x=0, y=0, text="a"))
    manager.add(TextAnnotation(page=1, x=0, y=0, text="b"))
    assert manager.undo()
    assert manager.annotations == [a]
    assert manager.can_redo()

    manager.add(TextAnnotation(page=2, x=0, y=0, text="c"))
    assert not manager.can_redo()
    assert [ann.text for ann in manager.annotations] == ["a", "c"]


def test_undo_redo_restore_snapshots(manager: AnnotationManager) -> None:
    a = manager.add(TextAnnotation(page=1, x=0, y=0))
    manager.update(a.id, text="changed")
    assert manager.undo()
    assert manager.get(a.id).text == a.text
    assert manager.redo()
    assert manager.get(a.id).text == "changed"


def test_update_unknown_id_is_noop(manager: AnnotationManager) -> None:
    manager.add(TextAnnotation(page=1, x=0, y=0))
    before = manager.history_index
    assert manager.update("missing", text="x") is None
    assert manager.history_index == before


def test_update_cannot_change_id(manager: AnnotationManager) -> None:
    a = manager.add(TextAnnotation(page=1, x=0, y=0))
    with pytest.raises(ValueError):
        manager.update(a.id, id="other")


def test_drag_is_a_single_history_step(manager: AnnotationManager) -> None:
    sig = manager.add(_signature())
    start = manager.history_index
    for step in range(1, 6):
        manager.move(sig.id, step * 10, step * 5)
    assert manager.history_index == start

    assert manager.commit()
    assert manager.history_index == start + 1
    assert (manager.get(sig.id).x, manager.get(sig.id).y) == (50, 25)

    manager.undo()
    assert (manager.get(sig.id).x, manager.get(sig.id).y) == (0, 0)


def test_set_editing_only_applies_to_text(manager: AnnotationManager) -> None:
    text = manager.add(TextAnnotation(page=1, x=0, y=0))
    sig = manager.add(_signature())
    assert manager.set_editing(text.id, False).editing is False
    assert manager.set_editing(sig.id, False) is None


def test_delete(manager: AnnotationManager) -> None:
    a = manager.add(TextAnnotation(page=1, x=0, y=0))
    assert manager.delete(a.id)
    assert not manager.delete(a.id)
    assert manager.get_annotation_count() == 0
    manager.undo()
    assert manager.get(a.id) == a


def test_clear_all_is_a_hard_reset(manager: AnnotationManager) -> None:
    manager.add(TextAnnotation(page=1, x=0, y=0))
    manager.add(_signature(page=2))
    manager.clear_all()

    assert manager.annotations == []
    assert manager.history_index == 0
    assert not manager.can_undo()
    assert not manager.undo()


def test_page_queries(manager: AnnotationManager) -> None:
    manager.add(TextAnnotation(page=1, x=0, y=0))
    manager.add(_signature(page=2))
    manager.add(_signature(page=1))

    assert len(manager.get_annotations_for_page(1)) == 2
    assert sorted(manager.annotations_by_page()) == [1, 2]


def test_hit_test_returns_topmost(manager: AnnotationManager) -> None:
    lower = manager.add(_signature(x=0, y=0))
    upper = manager.add(_signature(x=50, y=0))

    assert manager.get_annotation_at_point(1, 75, 25).id == upper.id
    assert manager.get_annotation_at_point(1, 10, 25).id == lower.id
    assert manager.get_annotation_at_point(1, 500, 500) is None
    assert manager.get_annotation_at_point(2, 75, 25) is None


def test_text_bounds_grow_with_content() -> None:
    short = TextAnnotation(page=1, x=10, y=20, text="Hi", font_size=16)
    long = TextAnnotation(page=1, x=10, y=20, text="Hello there, world", font_size=16)
    x0, y0, x1, y1 = short.bounds()
    assert (x0, y0) == (10, 20)
    assert y1 - y0 == pytest.approx(16 * 1.2)
    assert long.bounds()[2] > x1


def test_emptied_text_can_still_be_hit(manager: AnnotationManager) -> None:
    label = manager.add(TextAnnotation(page=1, x=100, y=100, text="hello", font_size=16))
    manager.update(label.id, text="", editing=False)

    x0, _, x1, _ = manager.get(label.id).bounds()
    assert x1 - x0 == pytest.approx(16)
    assert manager.get_annotation_at_point(1, 101, 105).id == label.id


def test_signature_requires_exactly_one_representation() -> None:
    with pytest.raises(ValueError):
        SignatureAnnotation(page=1, x=0, y=0, width=10, height=10)
    with pytest.raises(ValueError):
        SignatureAnnotation(page=1, x=0, y=0, width=10, height=10,
                            stroke_paths=(), image_data=b"png")
