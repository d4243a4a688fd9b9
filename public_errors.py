"""Exceptions raised while configuring, serving and copying extra public directories."""


class PublicDirsError(Exception):
    """Base class for every public-dirs error"""


class InvalidConfigurationError(PublicDirsError):
    """A declared option is malformed (missing or non-string dir, unknown values)"""


class InvalidPathError(InvalidConfigurationError):
    """An empty path was handed to the directory resolver"""


class PathNotFoundError(PublicDirsError):
    """A resolved cwd or dir does not exist on disk"""

    def __init__(self, path, option=None):
        self.path = path
        self.option = option
        super().__init__(f'Path does not exist: "{path}"')


class AssetStreamError(PublicDirsError):
    """A matched dev-time asset could not be opened for streaming"""

    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        message = f'Failed to stream public asset: "{path}"'
        if cause is not None:
            message += f' ({cause})'
        super().__init__(message)


class CopyError(PublicDirsError):
    """A build-time recursive copy failed"""

    def __init__(self, source, destination, cause=None):
        self.source = source
        self.destination = destination
        self.cause = cause
        message = f'Failed to copy public dir into output: {source} -> {destination}'
        if cause is not None:
            message += f' ({cause})'
        super().__init__(message)
