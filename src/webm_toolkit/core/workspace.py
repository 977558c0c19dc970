"""Per-invocation temporary workspace and per-job pass log ownership."""

from __future__ import annotations

import itertools
import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

LOG = logging.getLogger(__name__)

WORKSPACE_PREFIX = "webm-toolkit-"
PASSLOG_NAME = "ffmpeg2pass"


@dataclass(frozen=True)
class PassLog:
    """
    Token for the statistics files written by pass 1 and read by pass 2.

    ffmpeg appends stream suffixes such as ``-0.log`` to ``prefix``, so the
    handle owns a whole private directory rather than a single file.
    """

    directory: Path

    @property
    def prefix(self) -> Path:
        """Value for ffmpeg's ``-passlogfile`` option."""
        return self.directory / PASSLOG_NAME

    def files(self) -> list[Path]:
        """Statistics files currently present for this handle."""
        if not self.directory.exists():
            return []
        return sorted(p for p in self.directory.iterdir() if p.is_file())


class Workspace:
    """
    Temporary directory owned by one run of the tool.

    Use as a context manager; the directory and everything in it is removed
    on exit, including exits caused by errors or ``KeyboardInterrupt``.
    """

    def __init__(self, parent: Path | None = None) -> None:
        self._parent = parent
        self._tempdir: tempfile.TemporaryDirectory[str] | None = None
        self._job_counter = itertools.count(1)

    @property
    def path(self) -> Path:
        """Root of the workspace; only valid inside the context."""
        if self._tempdir is None:
            msg = "Workspace is not active"
            raise RuntimeError(msg)
        return Path(self._tempdir.name)

    def __enter__(self) -> Workspace:
        self._tempdir = tempfile.TemporaryDirectory(prefix=WORKSPACE_PREFIX, dir=self._parent)
        LOG.debug("Created workspace %s", self._tempdir.name)
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        if self._tempdir is not None:
            LOG.debug("Removing workspace %s", self._tempdir.name)
            self._tempdir.cleanup()
            self._tempdir = None

    def file(self, name: str) -> Path:
        """Path for a named scratch file inside the workspace."""
        return self.path / name

    @contextmanager
    def passlog(self) -> Iterator[PassLog]:
        """Acquire a pass log unique to one encode job and delete it afterwards."""
        directory = Path(tempfile.mkdtemp(prefix=f"job{next(self._job_counter)}-", dir=self.path))
        handle = PassLog(directory)
        LOG.debug("Acquired pass log %s", handle.prefix)
        try:
            yield handle
        finally:
            shutil.rmtree(directory, ignore_errors=True)
            LOG.debug("Released pass log %s", handle.prefix)
