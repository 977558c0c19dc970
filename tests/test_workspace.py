"""Tests for the temporary workspace and pass logs."""

from pathlib import Path

import pytest

from webm_toolkit.core import Workspace


def test_workspace_removed_on_success() -> None:
    """The directory is gone after a normal exit."""
    with Workspace() as workspace:
        root = workspace.path
        workspace.file("trimmed.mkv").write_bytes(b"data")
        assert root.is_dir()

    assert not root.exists()


@pytest.mark.parametrize("error", [RuntimeError, KeyboardInterrupt])
def test_workspace_removed_on_error(error: type[BaseException]) -> None:
    """Errors and interrupts still remove the directory."""
    root: Path | None = None
    with pytest.raises(error):
        with Workspace() as workspace:
            root = workspace.path
            raise error

    assert root is not None
    assert not root.exists()


def test_workspace_path_requires_context() -> None:
    """Using the workspace outside its context is a programming error."""
    with pytest.raises(RuntimeError):
        _ = Workspace().path


def test_passlog_released_even_when_the_job_fails() -> None:
    """Pass log files are deleted on every exit path."""
    with Workspace() as workspace:
        with pytest.raises(ValueError):
            with workspace.passlog() as passlog:
                Path(f"{passlog.prefix}-0.log").write_text("stats")
                assert passlog.files()
                raise ValueError

        assert passlog.files() == []
        assert not passlog.directory.exists()


def test_passlogs_are_unique() -> None:
    """Two jobs never share a pass log."""
    with Workspace() as workspace:
        with workspace.passlog() as first, workspace.passlog() as second:
            assert first.prefix != second.prefix
            assert first.directory.parent == workspace.path
