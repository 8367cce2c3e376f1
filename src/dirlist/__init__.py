"""dirlist: directory-listing engine with an ls-compatible front end."""

__version__ = "0.1.0"


class DirlistError(Exception):
    """User-facing listing error.

    Base of every exception raised by the package. Raised directly for
    invalid option values; the CLI prints the message to stderr and
    exits with code 1.
    """


class EnumerationError(DirlistError):
    """A directory was opened but its entries could not be read."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class OutputClosedError(DirlistError):
    """The output destination stopped accepting data.

    Unlike every other listing failure this one is never recovered:
    the traversal unwinds as soon as it is raised.
    """
