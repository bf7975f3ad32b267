class SlurmGenError(Exception):
    """Base class for errors raised while generating cluster job files."""


class ConfigurationError(SlurmGenError):
    """The input location is not a directory."""


class FileCreationError(SlurmGenError):
    """
    An output file could not be deleted or created.

    Parameters
    ----------
    path : str or os.PathLike
        The output file that could not be prepared.
    action : str
        Either "delete" or "create".

    """

    def __init__(self, path, action):
        self.path = path
        self.action = action
        super().__init__(f"Could not {action} {path} - aborting.")


class ImageOpenError(SlurmGenError):
    """An image file could not be opened by the image reader."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        message = f"Failed to initialise {path}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
