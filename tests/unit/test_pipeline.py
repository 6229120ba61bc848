import asyncio
import io
import zipfile

import pytest

from images_to_docx import (
    Footprint,
    ImagePipeline,
    ProgressState,
    ProgressTracker,
    RawImageInput,
    RenderError,
    Settings,
)
from images_to_docx.services import pipeline as pipeline_mod


def run_with_progress(files, **kwargs):
    seen = []
    tracker = ProgressTracker()
    tracker.subscribe(seen.append)
    p = ImagePipeline(Settings(), progress=tracker, quiet=True)
    try:
        return p.run(files, **kwargs), seen, tracker
    except RenderError as e:
        return e, seen, tracker


def test_seven_images_three_rows(jpeg_input, monkeypatch):
    captured = {}
    real_layout = pipeline_mod.layout

    def spy_layout(images, columns):
        rows = real_layout(images, columns)
        captured["rows"] = rows
        return rows

    monkeypatch.setattr(pipeline_mod, "layout", spy_layout)
    files = [jpeg_input(f"{i}.jpg", 300 + i, 200) for i in range(7)]
    artifact, seen, tracker = run_with_progress(files, columns=3)

    assert artifact.filename == "images.docx"
    rows = captured["rows"]
    assert len(rows) == 3
    assert [r.occupied_count for r in rows] == [3, 3, 1]
    assert [c.image.name for r in rows for c in r.cells if not c.is_empty] == [f"{i}.jpg" for i in range(7)]
    assert all(c.image.display_width == 128 and c.image.display_height == 170 for c in rows[0].cells)

    # strictly increasing progress, then reset
    assert seen[0] == ProgressState(0, 7)
    assert [s.current for s in seen[1:-1]] == list(range(1, 8))
    assert seen[-1] == ProgressState(0, 0)
    assert tracker.state == ProgressState(0, 0)


def test_footprint_override(jpeg_input):
    artifact, _, _ = run_with_progress([jpeg_input(w=1600, h=1200)], footprint=Footprint(64, 64))
    with zipfile.ZipFile(io.BytesIO(artifact.data)) as z:
        xml = z.read("word/document.xml")
    assert b'cx="%d"' % (64 * 9525) in xml


@pytest.mark.parametrize("k", [1, 3, 5])
def test_bad_item_aborts_batch(jpeg_input, k):
    files = [jpeg_input(f"{i}.jpg") for i in range(1, 6)]
    files[k - 1] = RawImageInput(f"bad{k}.png", "image/png", b"garbage")
    err, seen, tracker = run_with_progress(files)

    assert isinstance(err, RenderError)
    assert err.file_name == f"bad{k}.png"
    assert f"bad{k}.png" in str(err)
    assert tracker.state == ProgressState(0, 0)
    # progress advanced only for the items before the failure
    assert max(s.current for s in seen) == k - 1


def test_failed_heic_without_native_fallback_aborts():
    class NoFrames:
        def decode(self, data):
            from images_to_docx import DecodeError, DecodeErrorKind

            raise DecodeError(DecodeErrorKind.NO_FRAMES)

    from images_to_docx import CodecGateway

    p = ImagePipeline(Settings(), gateway=CodecGateway(decoder=NoFrames(), quiet=True), quiet=True)
    with pytest.raises(RenderError) as ei:
        p.run([RawImageInput("IMG_1.HEIC", "image/heic", b"not decodable anywhere")])
    assert ei.value.file_name == "IMG_1.HEIC"


def test_empty_batch_is_noop():
    artifact, seen, tracker = run_with_progress([])
    assert artifact is None
    assert seen == []
    assert tracker.state == ProgressState(0, 0)


def test_invalid_columns_rejected(jpeg_input):
    with pytest.raises(ValueError):
        ImagePipeline(quiet=True).run([jpeg_input()], columns=0)


def test_files_processed_one_at_a_time(jpeg_input, monkeypatch):
    active = {"now": 0, "max": 0}
    real_normalize = pipeline_mod.normalize

    def tracking_normalize(*args, **kwargs):
        active["now"] += 1
        active["max"] = max(active["max"], active["now"])
        try:
            return real_normalize(*args, **kwargs)
        finally:
            active["now"] -= 1

    monkeypatch.setattr(pipeline_mod, "normalize", tracking_normalize)
    ImagePipeline(quiet=True).run([jpeg_input(f"{i}.jpg") for i in range(4)])
    assert active["max"] == 1


def test_sources_released_on_both_paths(jpeg_input, monkeypatch):
    sources = []
    from images_to_docx import CodecGateway

    class RecordingGateway(CodecGateway):
        def resolve(self, file):
            src = super().resolve(file)
            sources.append(src)
            return src

    files = [jpeg_input("ok.jpg"), RawImageInput("bad.png", "image/png", b"garbage")]
    p = ImagePipeline(gateway=RecordingGateway(quiet=True), quiet=True)
    with pytest.raises(RenderError):
        p.run(files)
    assert len(sources) == 2
    assert all(s.closed for s in sources)


def test_run_async_with_queue(jpeg_input):
    async def scenario():
        q = asyncio.Queue()
        p = ImagePipeline(progress=ProgressTracker(queue=q), quiet=True)
        artifact = await p.run_async([jpeg_input("a.jpg"), jpeg_input("b.jpg")])
        states = []
        while not q.empty():
            states.append(q.get_nowait())
        return artifact, states

    artifact, states = asyncio.run(scenario())
    assert artifact is not None
    assert states == [ProgressState(0, 2), ProgressState(1, 2), ProgressState(2, 2), ProgressState(0, 0)]


def test_logs_progress_lines(jpeg_input, capsys):
    ImagePipeline().run([jpeg_input("a.jpg"), jpeg_input("b.jpg")])
    err = capsys.readouterr().err
    assert "[images_to_docx] [1/2] a.jpg" in err
    assert "[images_to_docx] [2/2] b.jpg" in err


def test_broken_progress_consumers_do_not_abort(jpeg_input):
    def broken(state):
        if state.current == 1:
            raise RuntimeError("ui went away")

    async def scenario():
        tracker = ProgressTracker(queue=asyncio.Queue(maxsize=1), quiet=True)
        tracker.subscribe(broken)
        artifact = await ImagePipeline(progress=tracker, quiet=True).run_async([jpeg_input("a.jpg"), jpeg_input("b.jpg")])
        return artifact, tracker.state

    artifact, state = asyncio.run(scenario())
    assert artifact is not None
    assert zipfile.is_zipfile(io.BytesIO(artifact.data))
    assert state == ProgressState(0, 0)


def test_assembly_failure_aborts_and_resets(jpeg_input, monkeypatch):
    from images_to_docx import AssemblyError

    def failing_assemble(rows, filename):
        raise AssemblyError("container refused the table")

    monkeypatch.setattr(pipeline_mod, "assemble", failing_assemble)
    seen = []
    tracker = ProgressTracker()
    tracker.subscribe(seen.append)
    p = ImagePipeline(progress=tracker, quiet=True)
    with pytest.raises(AssemblyError):
        p.run([jpeg_input("a.jpg"), jpeg_input("b.jpg")])
    assert tracker.state == ProgressState(0, 0)
    assert seen[-2] == ProgressState(2, 2)
    assert seen[-1] == ProgressState(0, 0)
