import logging
import os

import tifffile
from PIL import Image

from slurmgen_core.errors import ImageOpenError

# Extensions read with tifffile, where one container may hold several series.
TIFF_EXTENSIONS = (".tif", ".tiff", ".lsm", ".btf", ".tf8", ".tf2")
# Plain raster formats, always a single series.
RASTER_EXTENSIONS = (".png", ".jpg", ".jpeg")


class ImageCollaborator:
    """
    Interface for the image reader consumed by the directory walker.

    Implementations list the image files they can read in a directory,
    open one of them, and report how many independently addressable
    series (image stacks) the opened container holds.
    """

    def list_valid_files(self, directory):
        """Return the names of readable image files directly in `directory`."""
        raise NotImplementedError

    def open(self, path):
        """Open `path` and return a handle. Raises ImageOpenError on failure."""
        raise NotImplementedError

    def series_count(self, handle):
        """Return the number of series (>= 0) in an opened container."""
        raise NotImplementedError

    def close(self, handle):
        """Release a handle returned by `open`."""


class TiffImageCollaborator(ImageCollaborator):
    """
    Image reader backed by tifffile for TIFF-family containers
    (including OME-TIFF and LSM) and Pillow for plain raster images.

    Parameters
    ----------
    extensions : tuple of str, optional
        Lower-case file extensions treated as valid image files.
        Defaults to the TIFF family plus PNG and JPEG.
    logger : logging.Logger, optional
        Destination for diagnostic messages.

    """

    def __init__(self, extensions=None, logger=None):
        if extensions is None:
            extensions = TIFF_EXTENSIONS + RASTER_EXTENSIONS
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.logger = logger or logging.getLogger(__name__)

    def list_valid_files(self, directory):
        """
        List readable image files directly inside a directory.

        Hidden files (names starting with '.') and files whose extension
        is not recognised are left out. The result is sorted.

        Parameters
        ----------
        directory : str or os.PathLike
            The directory to scan. It is not descended into.

        Returns
        -------
        list of str
            File names, relative to `directory`.
        """
        valid = []
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.name.startswith("."):
                    continue
                if not entry.is_file():
                    continue
                if entry.name.lower().endswith(self.extensions):
                    valid.append(entry.name)
        valid.sort()
        self.logger.debug(f"Found {len(valid)} valid files in {directory}")
        return valid

    def open(self, path):
        path = os.fspath(path)
        if path.lower().endswith(TIFF_EXTENSIONS):
            return self._open_tiff(path)
        try:
            return Image.open(path)
        except Exception as e:
            raise ImageOpenError(path, e) from e

    def series_count(self, handle):
        if isinstance(handle, tifffile.TiffFile):
            return len(handle.series)
        return 1

    def close(self, handle):
        handle.close()

    @staticmethod
    def _open_tiff(path):
        try:
            handle = tifffile.TiffFile(path)
        except Exception as e:
            raise ImageOpenError(path, e) from e

        # Series are parsed lazily; force it so broken files fail here.
        try:
            len(handle.series)
        except Exception as e:
            handle.close()
            raise ImageOpenError(path, e) from e
        return handle
