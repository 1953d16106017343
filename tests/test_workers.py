from __future__ import annotations

from pathlib import Path

import pytest

fitz = pytest.importorskip("fitz")
pytest.importorskip("PyQt5.QtCore")

from PyQt5.QtCore import QCoreApplication

from inkstamp.controllers import EditorController, editor_controller
from inkstamp.core.annotations import TextAnnotation
from inkstamp.core.document import DocumentCompositor
from inkstamp.core.document.render_worker import RenderWorker
from inkstamp.core.document.renderer import RenderRequest
from inkstamp.core.export import ExportWorker
from inkstamp.core.page import Size
from inkstamp.core.session import EditorSession


@pytest.fixture(scope="module")
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def test_render_worker_emits_page(qt_app, two_page_pdf: bytes) -> None:
    rendered, failed = [], []
    worker = RenderWorker(two_page_pdf, RenderRequest(ticket=1, page_number=2, scale=1.0))
    worker.rendered.connect(lambda request, page: rendered.append((request, page)))
    worker.failed.connect(lambda request, message: failed.append(message))

    worker.run()

    assert failed == []
    request, page = rendered[0]
    assert request.ticket == 1
    assert (page.page_number, page.width, page.height) == (2, 600, 800)


def test_render_worker_reports_failure(qt_app, two_page_pdf: bytes) -> None:
    failed = []
    worker = RenderWorker(two_page_pdf, RenderRequest(ticket=7, page_number=9, scale=1.0))
    worker.failed.connect(lambda request, message: failed.append((request.ticket, message)))

    worker.run()

    assert failed and failed[0][0] == 7


def test_export_worker_writes_output(qt_app, two_page_pdf: bytes, tmp_path: Path) -> None:
    output = tmp_path / "annotated.pdf"
    finished, exported = [], []
    worker = ExportWorker(
        DocumentCompositor(),
        two_page_pdf,
        [TextAnnotation(page=1, x=100, y=100, text="Approved", id="a")],
        {1: Size(600, 800)},
        str(output),
    )
    worker.finished.connect(lambda ok, message: finished.append(ok))
    worker.exported.connect(exported.append)

    worker.run()

    assert finished == [True]
    assert output.read_bytes() == exported[0].data
    with fitz.open(str(output)) as doc:
        assert "Approved" in doc[0].get_text()
    assert list(tmp_path.iterdir()) == [output]


def test_export_worker_reports_bad_source(qt_app) -> None:
    finished = []
    worker = ExportWorker(DocumentCompositor(), b"garbage", [], {})
    worker.finished.connect(lambda ok, message: finished.append((ok, message)))

    worker.run()

    assert finished and finished[0][0] is False


def test_controller_reports_rejected_file(qt_app) -> None:
    controller = EditorController(EditorSession())
    errors, closed = [], []
    controller.error_occurred.connect(lambda title, message: errors.append(message))
    controller.document_closed.connect(lambda: closed.append(True))

    assert not controller.open_bytes(b"hello", "notes.txt")
    assert errors == ["Please select a valid PDF file"]
    assert closed == [True]


def test_controller_annotation_commands(qt_app, two_page_pdf: bytes) -> None:
    session = EditorSession()
    session.load_document(two_page_pdf, "form.pdf")
    controller = EditorController(session)
    changes, errors = [], []
    controller.annotations_changed.connect(lambda: changes.append(True))
    controller.error_occurred.connect(lambda title, message: errors.append(title))

    assert controller.add_text() is None
    assert errors == ["Add Text"]

    session.render_current()
    annotation = controller.add_text()
    controller.move_annotation(annotation.id, 10, 20)
    controller.finish_move()
    controller.update_annotation(annotation.id, text="Signed")
    assert session.annotations.get(annotation.id).text == "Signed"

    assert controller.undo()
    assert controller.redo()
    assert controller.delete_annotation(annotation.id)
    assert not controller.delete_annotation(annotation.id)
    assert len(changes) == 7
    assert controller.current_page_annotations() == []


def _drain(qt_app, predicate, workers) -> None:
    for _ in range(20):
        if not predicate():
            return
        for worker in workers:
            worker.wait()
        qt_app.processEvents()
    raise AssertionError("workers did not settle")


def test_controller_runs_one_render_at_a_time(qt_app, monkeypatch, two_page_pdf: bytes) -> None:
    started = []

    class RecordingRenderWorker(RenderWorker):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            started.append(self)

    monkeypatch.setattr(editor_controller, "RenderWorker", RecordingRenderWorker)
    controller = EditorController(EditorSession())
    rendered = []
    controller.page_rendered.connect(rendered.append)

    assert controller.open_bytes(two_page_pdf, "form.pdf")
    for _ in range(5):
        controller.request_render()
    controller.next_page()
    controller.zoom_in()

    assert len(started) == 1
    assert sum(worker.isRunning() for worker in started) <= 1

    _drain(qt_app, controller.is_rendering, started)

    # The first render went stale; only the latest queued request ran after it
    assert len(started) == 2
    assert len(rendered) == 1
    assert (rendered[0].page_number, rendered[0].scale) == (2, controller.session.scale)
    assert controller.session.has_current_render()


def test_controller_close_drops_queued_render(qt_app, monkeypatch, two_page_pdf: bytes) -> None:
    started = []

    class RecordingRenderWorker(RenderWorker):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            started.append(self)

    monkeypatch.setattr(editor_controller, "RenderWorker", RecordingRenderWorker)
    controller = EditorController(EditorSession())
    rendered = []
    controller.page_rendered.connect(rendered.append)

    controller.open_bytes(two_page_pdf, "form.pdf")
    controller.request_render()
    controller.close_document()

    _drain(qt_app, controller.is_rendering, started)

    assert len(started) == 1
    assert rendered == []


def test_controller_export_reports_page_progress(qt_app, two_page_pdf: bytes,
                                                 tmp_path: Path) -> None:
    session = EditorSession()
    session.load_document(two_page_pdf, "form.pdf")
    session.render_current()
    controller = EditorController(session)
    controller.add_text()
    messages, ended = [], []
    controller.export_progress.connect(messages.append)
    controller.export_ended.connect(ended.append)

    assert controller.export(str(tmp_path / "out.pdf"))
    worker = controller._export_worker
    _drain(qt_app, lambda: not ended, [worker])

    assert ended == [True]
    assert not controller.is_exporting()
    assert "Exporting annotations... 1/1 pages" in messages
    assert (tmp_path / "out.pdf").exists()
