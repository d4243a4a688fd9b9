"""
Build-time merging of extra public directories into the site output.

Copies are best-effort: a failing directory is reported and logged, and the
remaining directories are still copied.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Iterable, Optional

from public_errors import CopyError
from public_options import CopyPhase, ResolvedOption
from site_build import is_within

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopyResult:
    option: ResolvedOption
    destination: str
    error: Optional[CopyError] = None

    @property
    def ok(self):
        return self.error is None


@dataclass(frozen=True)
class MergeReport:
    phase: CopyPhase
    results: tuple = ()

    @property
    def copied(self):
        return [r for r in self.results if r.ok]

    @property
    def failed(self):
        return [r for r in self.results if not r.ok]


def copy_directory(source, destination):
    """
    Recursively copy source into destination, merging with what is already there.
    Files with the same relative path are overwritten.
    A destination inside source is refused.
    """
    if is_within(source, destination):
        raise CopyError(source, destination, 'cannot copy a directory into itself or its subdirectory')
    try:
        shutil.copytree(source, destination, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise CopyError(source, destination, e) from e


def merge_phase(options: Iterable[ResolvedOption], phase: CopyPhase, output_directory: str,
                log: Optional[logging.Logger] = None) -> MergeReport:
    """Copy every option registered for phase into output_directory, in declaration order"""
    log = log or logger
    phase = CopyPhase(phase)
    destination = os.path.abspath(output_directory)
    results = []

    for option in options:
        if option.copy_phase is not phase:
            continue

        if option.logging_enabled:
            log.info(f'Copying directory into output: {option.directory}')

        try:
            copy_directory(option.directory, destination)
        except CopyError as e:
            log.warning(f'{e} [copy {phase.value}, option {option.source!r}]')
            results.append(CopyResult(option, destination, e))
            continue

        results.append(CopyResult(option, destination))

    return MergeReport(phase=phase, results=tuple(results))
