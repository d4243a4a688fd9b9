"""
Option normalization for extra public directories.

Turns the loosely-typed entries a project declares (bare strings or mappings
with dir/cwd/copy/log keys) into validated ResolvedOption values whose
directories are absolute and exist on disk.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from public_errors import InvalidConfigurationError, InvalidPathError, PathNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CWD = './'


class CopyPhase(str, Enum):
    """When a directory is merged into the output, relative to the native static copy"""
    BEFORE = 'before'
    AFTER = 'after'


class LogLevel(str, Enum):
    OFF = 'off'
    MINIMAL = 'minimal'
    VERBOSE = 'verbose'


@dataclass(frozen=True)
class RawOption:
    """A parsed option whose paths have not been resolved yet"""
    directory: str
    cwd: str = DEFAULT_CWD
    copy_phase: CopyPhase = CopyPhase.BEFORE
    log_level: LogLevel = LogLevel.OFF


@dataclass(frozen=True)
class ResolvedOption:
    directory: str
    working_directory: str
    copy_phase: CopyPhase = CopyPhase.BEFORE
    log_level: LogLevel = LogLevel.OFF
    source: Any = field(default=None, compare=False)

    @property
    def verbose(self):
        return self.log_level is LogLevel.VERBOSE

    @property
    def logging_enabled(self):
        return self.log_level is not LogLevel.OFF


@dataclass(frozen=True)
class DroppedOption:
    source: Any
    error: Exception


@dataclass(frozen=True)
class NormalizeReport:
    options: tuple = ()
    dropped: tuple = ()


def parse_copy_phase(value):
    """Map a copy value onto CopyPhase; None means the default 'before'"""
    if value is None:
        return CopyPhase.BEFORE
    if isinstance(value, CopyPhase):
        return value
    if isinstance(value, str):
        try:
            return CopyPhase(value.strip().lower())
        except ValueError:
            pass
    raise InvalidConfigurationError(f'Invalid copy phase: {value!r} (expected "before" or "after")')


def parse_log_level(value):
    """
    Map a log value onto LogLevel.

    None and False turn logging off, True is shorthand for 'minimal'.
    """
    if value is None or value is False:
        return LogLevel.OFF
    if value is True:
        return LogLevel.MINIMAL
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, str):
        try:
            return LogLevel(value.strip().lower())
        except ValueError:
            pass
    raise InvalidConfigurationError(f'Invalid log level: {value!r} (expected "verbose", "minimal" or a boolean)')


def parse_option(raw):
    """
    Parse one declared entry into a RawOption.

    A bare string (or path-like) is shorthand for {'dir': raw}. The input is
    never modified; defaults are applied on the returned value.
    """
    if isinstance(raw, RawOption):
        return raw
    if isinstance(raw, os.PathLike):
        raw = os.fspath(raw)
    if isinstance(raw, str):
        raw = {'dir': raw}
    if not isinstance(raw, Mapping):
        raise InvalidConfigurationError(f'Option must be a string or a mapping, got {type(raw).__name__}')

    directory = raw.get('dir')
    if isinstance(directory, os.PathLike):
        directory = os.fspath(directory)
    if not directory or not isinstance(directory, str):
        raise InvalidConfigurationError(f'Option is missing a "dir" string: {raw!r}')

    cwd = raw.get('cwd') or DEFAULT_CWD
    if isinstance(cwd, os.PathLike):
        cwd = os.fspath(cwd)
    if not isinstance(cwd, str):
        raise InvalidConfigurationError(f'Option "cwd" must be a string: {raw!r}')

    return RawOption(
        directory=directory,
        cwd=cwd,
        copy_phase=parse_copy_phase(raw.get('copy')),
        log_level=parse_log_level(raw.get('log')),
    )


def is_file_url(path):
    return isinstance(path, str) and path.startswith('file:/')


def file_url_to_path(url):
    """Convert a file:// URL into a local filesystem path"""
    parsed = urlparse(url)
    if parsed.scheme != 'file':
        raise InvalidPathError(f'Not a file URL: "{url}"')
    if parsed.netloc not in ('', 'localhost'):
        raise InvalidPathError(f'File URL host must be empty or "localhost": "{url}"')
    return url2pathname(parsed.path)


def resolve_directory(base, path) -> Optional[str]:
    """
    Validate and transform a path string into an absolute directory path.

    - file:// URLs are converted to filesystem paths
    - relative paths are resolved against base
    - a path with a file extension is replaced by its parent directory
      (an existing directory whose name contains a dot is kept as is)

    Returns None when the resulting directory does not exist.
    Raises InvalidPathError when path is empty.
    """
    if not path:
        raise InvalidPathError(f'Invalid path: "{path}"')

    path = os.fspath(path)

    if is_file_url(path):
        path = file_url_to_path(path)

    if not os.path.isabs(path):
        path = os.path.join(base, path)
    path = os.path.abspath(path)

    # Path points at a file
    if os.path.splitext(path)[1] and not os.path.isdir(path):
        path = os.path.dirname(path)

    if not os.path.isdir(path):
        return None

    return path


def resolve_option(raw, project_root, source=None):
    """
    Resolve a RawOption into a ResolvedOption.

    cwd is resolved against project_root, then dir against the resolved cwd.
    Raises PathNotFoundError if either does not exist.
    """
    source = raw if source is None else source

    working_directory = resolve_directory(project_root, raw.cwd)
    if working_directory is None:
        raise PathNotFoundError(os.path.join(project_root, raw.cwd), source)

    directory = resolve_directory(working_directory, raw.directory)
    if directory is None:
        raise PathNotFoundError(os.path.join(working_directory, raw.directory), source)

    return ResolvedOption(
        directory=directory,
        working_directory=working_directory,
        copy_phase=raw.copy_phase,
        log_level=raw.log_level,
        source=source,
    )


def normalize_options(entries: Iterable[Any], project_root: str, log: Optional[logging.Logger] = None,
                      strict: bool = False) -> NormalizeReport:
    """
    Normalize declared entries, preserving declaration order.

    Malformed entries are dropped without a warning. Entries whose cwd or dir
    cannot be found are dropped too, with a warning when the entry asked for
    verbose logging. With strict=True a missing path raises PathNotFoundError
    instead.
    """
    log = log or logger
    options = []
    dropped = []

    for entry in entries:
        try:
            raw = parse_option(entry)
            option = resolve_option(raw, project_root, source=entry)
        except InvalidConfigurationError as e:
            log.debug(f'Ignoring invalid public dir option {entry!r}: {e}')
            dropped.append(DroppedOption(entry, e))
            continue
        except PathNotFoundError as e:
            if strict:
                raise
            if raw.log_level is LogLevel.VERBOSE:
                log.warning(f'Skipping public dir option {entry!r}: {e}')
            dropped.append(DroppedOption(entry, e))
            continue

        if option.verbose:
            log.info(f'Resolved public dir:\t{option.directory}\t(copy {option.copy_phase.value})')
        options.append(option)

    return NormalizeReport(options=tuple(options), dropped=tuple(dropped))
