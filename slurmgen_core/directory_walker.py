import logging
import os
from pathlib import Path

from .errors import ConfigurationError, ImageOpenError


class DirectoryWalker:
    """
    Enumerates (file, series) work units beneath a root directory.

    The walker visits every subdirectory of the root depth-first and in
    pre-order, asking the image collaborator which files in that
    subdirectory are valid images and how many series each one holds.
    One work unit is produced per series.

    Files sitting directly in the root are never enumerated: only
    subdirectories of the root (and their own subdirectories) are
    scanned for images. Hidden directories (names starting with '.')
    are excluded. Symlinked directories are followed, but a directory
    already visited through another link is not entered again.

    Iterating the walker is lazy and restartable. Each call to
    ``iter()`` starts a fresh traversal of the tree.

    Parameters
    ----------
    root : str or os.PathLike
        The directory to traverse.
    collaborator : slurmgen_utils.ImageCollaborator
        Lists valid files, opens them and reports series counts.
    logger : logging.Logger, optional
        Destination for diagnostic messages.

    Attributes
    ----------
    root : pathlib.Path
        The absolute root directory. Symlinks in it are kept as given.

    """

    def __init__(self, root, collaborator, logger=None):
        self.root = Path(root).absolute()
        self.collaborator = collaborator
        self.logger = logger or logging.getLogger(__name__)

    def __iter__(self):
        return self.walk()

    def check_root(self):
        """Raise ConfigurationError if the root is not a directory."""
        if not self.root.is_dir():
            raise ConfigurationError(
                f"Input is not a directory - aborting: {self.root}"
            )

    def walk(self):
        """
        Yield work units for the whole tree.

        Yields
        ------
        tuple of (str, int)
            The absolute file path and the zero-based series index.

        Raises
        ------
        ConfigurationError
            If the root is not a directory. Raised before anything
            is yielded.
        """
        self.check_root()
        visited = {os.path.realpath(self.root)}
        for subdir in self._subdirectories(self.root):
            yield from self._walk_directory(subdir, visited)

    def _walk_directory(self, directory, visited):
        real_path = os.path.realpath(directory)
        if real_path in visited:
            self.logger.debug(
                f"Skipping {directory}: already visited as {real_path}"
            )
            return
        visited.add(real_path)

        self.logger.debug(f"Scanning {directory}")
        for name in sorted(self.collaborator.list_valid_files(directory)):
            yield from self._file_units(directory / name)

        for subdir in self._subdirectories(directory):
            yield from self._walk_directory(subdir, visited)

    def _file_units(self, path):
        file_path = str(path)
        try:
            handle = self.collaborator.open(file_path)
        except ImageOpenError as e:
            self.logger.error(str(e))
            return

        try:
            n_series = self.collaborator.series_count(handle)
        finally:
            self.collaborator.close(handle)

        for series in range(n_series):
            yield file_path, series

    @staticmethod
    def _subdirectories(directory):
        with os.scandir(directory) as entries:
            subdirs = [
                entry.name
                for entry in entries
                if not entry.name.startswith(".") and entry.is_dir()
            ]
        return [directory / name for name in sorted(subdirs)]
