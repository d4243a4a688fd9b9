"""
Dev-time serving of files from extra public directories.

Each resolved option gets its own before-request function. A function either
answers the request with the matching file or returns None, which lets Flask
move on to the next before-request function and finally to the regular
routes (including the native static route).
"""

import os
from dataclasses import dataclass
from typing import Optional

from flask import current_app, request, send_file
from werkzeug.security import safe_join

from public_errors import AssetStreamError
from public_options import CopyPhase, ResolvedOption

# Paths reserved for framework/tooling endpoints, never looked up on disk
INTERNAL_PREFIX = '/@'
SERVED_METHODS = ('GET', 'HEAD')


@dataclass(frozen=True)
class AssetDecision:
    serve: bool
    reason: str  # not-asset | internal | unsafe | missing | shadowed | match
    path: Optional[str] = None


def strip_query(url):
    return url.split('?', 1)[0].split('#', 1)[0]


def resolve_asset(option: ResolvedOption, request_path: str, native_public_dir: Optional[str] = None) -> AssetDecision:
    """
    Decide whether request_path should be answered from option.directory.

    A 'before' option never serves a path the native public directory also
    provides, since the native copy overwrites it in the build output.
    """
    path = strip_query(request_path)

    if not os.path.splitext(path)[1]:
        return AssetDecision(False, 'not-asset')
    if path.startswith(INTERNAL_PREFIX):
        return AssetDecision(False, 'internal')

    relative = path.lstrip('/')
    candidate = safe_join(option.directory, relative)
    if candidate is None:
        return AssetDecision(False, 'unsafe')
    if not os.path.isfile(candidate):
        return AssetDecision(False, 'missing', candidate)

    if option.copy_phase is CopyPhase.BEFORE and native_public_dir:
        native = safe_join(native_public_dir, relative)
        if native is not None and os.path.exists(native):
            return AssetDecision(False, 'shadowed', candidate)

    return AssetDecision(True, 'match', candidate)


def stream_asset(path):
    """Build a file response for path, raising AssetStreamError if it cannot be opened"""
    try:
        return send_file(path)
    except OSError as e:
        raise AssetStreamError(path, e) from e


def make_asset_handler(option: ResolvedOption, native_public_dir: Optional[str] = None):
    """Create the before-request function serving assets for one option"""

    def serve_public_asset():
        if request.method not in SERVED_METHODS:
            return None

        decision = resolve_asset(option, request.path, native_public_dir)
        if not decision.serve:
            if decision.reason == 'shadowed' and option.verbose:
                current_app.logger.info(f'Public asset shadowed by static folder:\t{request.path}\t{decision.path}')
            return None

        if option.verbose:
            current_app.logger.info(f'Found public asset:\t{request.path}\t{decision.path}')

        try:
            return stream_asset(decision.path)
        except AssetStreamError as e:
            current_app.logger.warning(f'{e}; deferring {request.path} to the next handler [option {option.source!r}]')
            return None

    return serve_public_asset
