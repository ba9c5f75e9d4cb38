"""
Unit tests for segment concatenation.
"""

from pathlib import Path

import pytest

from slidereel.core.errors import ConcatenationError, EncodingError
from slidereel.core.models import RenderedSlide
from slidereel.core.workspace import Workspace
from slidereel.pipeline.concatenator import Concatenator, manifest_line
from tests.helpers import FakeEncoder


@pytest.fixture
def workspace(tmp_path):
    return Workspace.acquire(tmp_path / "out", 0)


def _segments(workspace, indices):
    rendered = []
    for i in indices:
        path = workspace.path_for("segment", i)
        path.write_bytes(b"mp4")
        rendered.append(RenderedSlide(index=i, segment_path=path))
    return rendered


class TestManifestLine:
    def test_quotes_absolute_path(self, tmp_path):
        path = tmp_path / "slide_0.mp4"
        assert manifest_line(path) == f"file '{path.resolve()}'"

    def test_escapes_single_quotes(self, tmp_path):
        path = tmp_path / "it's" / "slide_0.mp4"
        assert manifest_line(path).endswith("it'\\''s/slide_0.mp4'")


class TestConcatenator:
    @pytest.mark.asyncio
    async def test_manifest_follows_slide_order(self, workspace):
        encoder = FakeEncoder()
        rendered = _segments(workspace, [2, 0, 3, 1])
        output = workspace.path.parent / "final.mp4"

        result = await Concatenator(encoder).concatenate(rendered, workspace, output)

        assert result == output
        assert output.is_file()
        lines = encoder.manifests[0].splitlines()
        assert lines == [
            manifest_line(workspace.path_for("segment", i)) for i in range(4)
        ]
        assert workspace.manifest_path().read_text(encoding="utf-8") == encoder.manifests[0]
        assert not (output.parent / "final.part.mp4").exists()

    @pytest.mark.asyncio
    async def test_rejects_empty_set(self, workspace):
        with pytest.raises(ConcatenationError, match="No segments"):
            await Concatenator(FakeEncoder()).concatenate([], workspace, Path("x.mp4"))

    @pytest.mark.asyncio
    async def test_rejects_duplicate_indices(self, workspace):
        rendered = _segments(workspace, [0, 1])
        rendered.append(RenderedSlide(index=1, segment_path=rendered[1].segment_path))
        with pytest.raises(ConcatenationError, match="Duplicate"):
            await Concatenator(FakeEncoder()).concatenate(
                rendered, workspace, workspace.path.parent / "o.mp4"
            )

    @pytest.mark.asyncio
    async def test_rejects_missing_segment(self, workspace):
        rendered = _segments(workspace, [0, 1])
        rendered[1].segment_path.unlink()
        encoder = FakeEncoder()

        with pytest.raises(ConcatenationError, match="Missing segment"):
            await Concatenator(encoder).concatenate(
                rendered, workspace, workspace.path.parent / "o.mp4"
            )
        assert encoder.manifests == []

    @pytest.mark.asyncio
    async def test_join_failure_leaves_no_output(self, workspace):
        encoder = FakeEncoder(concat_error=EncodingError("concat", "bad stream"))
        output = workspace.path.parent / "final.mp4"

        with pytest.raises(ConcatenationError, match="bad stream"):
            await Concatenator(encoder).concatenate(
                _segments(workspace, [0, 1, 2, 3]), workspace, output
            )

        assert not output.exists()
        assert not (output.parent / "final.part.mp4").exists()

    @pytest.mark.asyncio
    async def test_unwritable_manifest_fails_the_join(self, workspace):
        encoder = FakeEncoder()
        rendered = _segments(workspace, [0, 1, 2, 3])
        workspace.manifest_path().mkdir()

        with pytest.raises(ConcatenationError, match="Cannot write concat manifest"):
            await Concatenator(encoder).concatenate(
                rendered, workspace, workspace.path.parent / "final.mp4"
            )

        assert encoder.manifests == []
