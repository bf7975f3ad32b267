import logging
from pathlib import Path

from .errors import FileCreationError

ENCODING = "ISO-8859-1"


class FileTransactor:
    """
    Context manager that (re)creates an output file and yields a
    writable text handle to it.

    An existing file is deleted before it is rewritten, so a previous
    run's output is always replaced rather than appended to. The handle
    is closed however the block exits. Nothing is rolled back: a file
    left half written by a failure stays on disk.

    Parameters
    ----------
    path : str or os.PathLike
        The output file.
    logger : logging.Logger, optional
        Destination for diagnostic messages.
    encoding : str, optional
        Text encoding of the file. Default is ISO-8859-1.

    Raises
    ------
    FileCreationError
        On entry, if an existing file cannot be deleted or a new one
        cannot be created.

    Examples
    --------
    >>> with FileTransactor("jobs.txt") as f:
    ...     f.write("0, /data/a/img.tif, 0\\n")

    """

    def __init__(self, path, logger=None, encoding=ENCODING):
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)
        self.encoding = encoding
        self._handle = None

    def __enter__(self):
        self._prepare()
        self._handle = open(
            self.path, "w", encoding=self.encoding, newline="\n"
        )
        return self._handle

    def __exit__(self, exc_type, exc, tb):
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()
        return False

    def _prepare(self):
        target = self.path.absolute()
        if self.path.exists():
            try:
                self.path.unlink()
            except OSError as e:
                raise FileCreationError(target, "delete") from e
            self.logger.debug(f"Deleted existing {target}")

        try:
            self.path.touch(exist_ok=False)
        except OSError as e:
            raise FileCreationError(target, "create") from e
