"""
Unit tests for per-item workspaces.
"""

import asyncio
import shutil

import pytest

from slidereel.core.workspace import MANIFEST_NAME, Workspace


class TestWorkspace:
    def test_acquire_creates_unique_directory(self, tmp_path):
        first = Workspace.acquire(tmp_path, 2)
        second = Workspace.acquire(tmp_path, 2)

        assert first.path.is_dir()
        assert second.path.is_dir()
        assert first.path != second.path
        assert first.unique_id.startswith("content_")
        assert first.unique_id.endswith("_2")
        assert first.path.name == f"temp_{first.unique_id}"

    def test_acquire_creates_missing_root(self, tmp_path):
        root = tmp_path / "nested" / "out"
        workspace = Workspace.acquire(root, 0)
        assert workspace.path.parent == root
        assert workspace.path.is_dir()

    def test_path_for_is_qualified_by_slide_index(self, tmp_path):
        workspace = Workspace.acquire(tmp_path, 0)

        assert workspace.path_for("image", 3).name == "image_3.jpg"
        assert workspace.path_for("audio", 3).name == "audio_3.mp3"
        assert workspace.path_for("segment", 3).name == "slide_3.mp4"
        assert workspace.path_for("segment", 0) != workspace.path_for("segment", 1)
        assert workspace.manifest_path().name == MANIFEST_NAME

    @pytest.mark.parametrize(("kind", "index"), [("video", 0), ("image", -1)])
    def test_path_for_rejects_bad_arguments(self, tmp_path, kind, index):
        workspace = Workspace.acquire(tmp_path, 0)
        with pytest.raises(ValueError):
            workspace.path_for(kind, index)

    @pytest.mark.asyncio
    async def test_release_is_idempotent(self, tmp_path):
        workspace = Workspace.acquire(tmp_path, 0)
        workspace.path_for("image", 0).write_bytes(b"img")

        await workspace.release()
        await workspace.release()

        assert workspace.released
        assert not workspace.path.exists()


class TestScopedWorkspace:
    @pytest.mark.asyncio
    async def test_released_on_success(self, tmp_path):
        async with Workspace.scoped(tmp_path, 0) as workspace:
            workspace.path_for("audio", 0).write_bytes(b"mp3")
        assert not workspace.path.exists()

    @pytest.mark.asyncio
    async def test_released_on_error_by_default(self, tmp_path):
        with pytest.raises(RuntimeError):
            async with Workspace.scoped(tmp_path, 0) as workspace:
                raise RuntimeError("boom")
        assert workspace.failed
        assert not workspace.path.exists()

    @pytest.mark.asyncio
    async def test_kept_on_error_when_requested(self, tmp_path):
        with pytest.raises(RuntimeError):
            async with Workspace.scoped(tmp_path, 0, keep_on_failure=True) as workspace:
                raise RuntimeError("boom")
        assert workspace.path.is_dir()

    @pytest.mark.asyncio
    async def test_kept_when_marked_failed(self, tmp_path):
        async with Workspace.scoped(tmp_path, 0, keep_on_failure=True) as workspace:
            workspace.mark_failed()
        assert workspace.path.is_dir()
        assert not workspace.released

    @pytest.mark.asyncio
    async def test_success_released_even_with_keep_flag(self, tmp_path):
        async with Workspace.scoped(tmp_path, 0, keep_on_failure=True) as workspace:
            pass
        assert not workspace.path.exists()

    @pytest.mark.asyncio
    async def test_tree_removal_runs_in_a_worker_thread(self, tmp_path, monkeypatch):
        offloaded = []
        real_to_thread = asyncio.to_thread

        async def recording_to_thread(func, /, *args, **kwargs):
            offloaded.append(func)
            return await real_to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

        async with Workspace.scoped(tmp_path, 0) as workspace:
            workspace.path_for("segment", 0).write_bytes(b"mp4")

        assert shutil.rmtree in offloaded
        assert not workspace.path.exists()
