"""
Timeline Tests

Tests for the timeline integrations showing:
- Resolve implementation against a stand-in scripting module
- New timeline creation vs append to the current one
- Failures returned as TimelineResult, never raised
- Factory modes

To run:
    pytest tests/timeline/test_timeline.py -v
"""

import sys
import types
from unittest.mock import MagicMock

import pytest

from timeline.factory import TimelineFactory
from timeline.implementations.mock_timeline import MockTimeline
from timeline.implementations.resolve_timeline import ResolveTimeline

FAKE_MODULE = "FakeResolveScript"
RECORDING = "C:/Videos/screen-recording-2025-01-15T14-30-22.mp4"


@pytest.fixture
def resolve_api(monkeypatch):
    """
    Install a stand-in scripting module returning a MagicMock Resolve.

    Usage:
        def test_x(resolve_api):
            resolve_api.project.GetCurrentTimeline.return_value = None
    """
    resolve = MagicMock(name="resolve")
    project = resolve.GetProjectManager.return_value.GetCurrentProject.return_value
    media_pool = project.GetMediaPool.return_value
    media_storage = resolve.GetMediaStorage.return_value
    media_storage.AddItemListToMediaPool.return_value = ["clip"]

    module = types.ModuleType(FAKE_MODULE)
    module.scriptapp = lambda name: resolve
    monkeypatch.setitem(sys.modules, FAKE_MODULE, module)

    return types.SimpleNamespace(
        resolve=resolve,
        project=project,
        media_pool=media_pool,
        media_storage=media_storage,
    )


# =============================================================================
# RESOLVE IMPLEMENTATION
# =============================================================================


@pytest.mark.unit
def test_resolve_unavailable_without_module():
    timeline = ResolveTimeline(module_name="NoSuchResolveModule")

    assert timeline.is_available() is False

    result = timeline.add_recording_to_timeline(RECORDING)
    assert result.success is False
    assert "not found" in result.error


@pytest.mark.unit
def test_resolve_appends_to_current_timeline(resolve_api):
    resolve_api.project.GetCurrentTimeline.return_value.GetName.return_value = "Edit 1"
    resolve_api.media_pool.AppendToTimeline.return_value = True

    result = ResolveTimeline(module_name=FAKE_MODULE).add_recording_to_timeline(RECORDING)

    assert result.success is True
    assert result.timeline_name == "Edit 1"
    assert result.created_new_timeline is False
    resolve_api.media_storage.AddItemListToMediaPool.assert_called_once_with([RECORDING])
    resolve_api.media_pool.AppendToTimeline.assert_called_once_with(["clip"])


@pytest.mark.unit
def test_resolve_append_falls_back_to_clip_info(resolve_api):
    resolve_api.project.GetCurrentTimeline.return_value.GetName.return_value = "Edit 1"
    resolve_api.media_pool.AppendToTimeline.side_effect = [False, True]

    result = ResolveTimeline(module_name=FAKE_MODULE).add_recording_to_timeline(RECORDING)

    assert result.success is True
    assert resolve_api.media_pool.AppendToTimeline.call_count == 2


@pytest.mark.unit
def test_resolve_append_failure_reported(resolve_api):
    resolve_api.media_pool.AppendToTimeline.return_value = False

    result = ResolveTimeline(module_name=FAKE_MODULE).add_recording_to_timeline(RECORDING)

    assert result.success is False
    assert "Failed to add clip" in result.error


@pytest.mark.unit
def test_resolve_creates_timeline_when_none_open(resolve_api):
    resolve_api.project.GetCurrentTimeline.return_value = None
    resolve_api.project.SetCurrentTimeline.return_value = True

    result = ResolveTimeline(module_name=FAKE_MODULE).add_recording_to_timeline(RECORDING)

    assert result.success is True
    assert result.created_new_timeline is True
    assert result.timeline_name.startswith("Screen Recording - ")
    name, clips = resolve_api.media_pool.CreateTimelineFromClips.call_args[0]
    assert name == result.timeline_name
    assert clips == ["clip"]


@pytest.mark.unit
def test_resolve_no_project(resolve_api):
    resolve_api.resolve.GetProjectManager.return_value.GetCurrentProject.return_value = None

    result = ResolveTimeline(module_name=FAKE_MODULE).add_recording_to_timeline(RECORDING)

    assert result.success is False
    assert "No project" in result.error


@pytest.mark.unit
def test_resolve_import_failure(resolve_api):
    resolve_api.media_storage.AddItemListToMediaPool.return_value = []

    result = ResolveTimeline(module_name=FAKE_MODULE).add_recording_to_timeline(RECORDING)

    assert result.success is False
    assert "import" in result.error


@pytest.mark.unit
def test_resolve_api_exception_contained(resolve_api):
    resolve_api.resolve.GetMediaStorage.side_effect = RuntimeError("bridge died")
    timeline = ResolveTimeline(module_name=FAKE_MODULE)

    result = timeline.add_recording_to_timeline(RECORDING)

    assert result.success is False
    assert "bridge died" in result.error


# =============================================================================
# FACTORY
# =============================================================================


@pytest.mark.unit
def test_factory_none_mode():
    assert TimelineFactory.create_timeline("none") is None


@pytest.mark.unit
def test_factory_mock_mode():
    assert isinstance(TimelineFactory.create_timeline("mock"), MockTimeline)


@pytest.mark.unit
def test_factory_auto_without_resolve_returns_none(monkeypatch):
    monkeypatch.setattr(ResolveTimeline, "is_available", lambda self: False)

    assert TimelineFactory.create_timeline("auto") is None


@pytest.mark.unit
def test_factory_resolve_mode_raises_when_unavailable(monkeypatch):
    monkeypatch.setattr(ResolveTimeline, "is_available", lambda self: False)

    with pytest.raises(RuntimeError):
        TimelineFactory.create_timeline("resolve")
