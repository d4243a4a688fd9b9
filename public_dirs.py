"""
Flask extension serving and building extra public directories.

Usage::

    public_dirs = PublicDirs('custom', {'dir': 'assets', 'copy': 'after'})
    public_dirs.init_app(app)

Options may also be declared in ``app.config['PUBLIC_DIRS']``; they are
appended after the constructor options.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from flask import current_app

from public_assets import make_asset_handler
from public_build import merge_phase
from public_options import CopyPhase, normalize_options
from site_build import build_done, build_setup, get_output_dir

EXTENSION_KEY = 'public_dirs'


@dataclass(frozen=True)
class PublicDirsState:
    """Configuration computed once by init_app and read by every later phase"""
    project_root: str
    output_directory: str
    native_public_directory: Optional[str]
    options: tuple = ()
    dropped: tuple = ()

    def options_for(self, phase):
        phase = CopyPhase(phase)
        return [o for o in self.options if o.copy_phase is phase]


def _config_entries(value):
    if not value:
        return []
    if isinstance(value, (str, os.PathLike, Mapping)):
        return [value]
    return list(value)


def get_state(app=None) -> PublicDirsState:
    app = app or current_app
    try:
        return app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError(
            'PublicDirs is not registered on this application. '
            'Call PublicDirs.init_app(app) first.'
        ) from None


def _merge(app, phase, output_dir=None):
    state = get_state(app)
    return merge_phase(state.options, phase, output_dir or state.output_directory, log=app.logger)


def merge_before_native_copy(app, output_dir=None, **extra):
    return _merge(app, CopyPhase.BEFORE, output_dir)


def merge_after_native_copy(app, output_dir=None, **extra):
    return _merge(app, CopyPhase.AFTER, output_dir)


class PublicDirs:
    def __init__(self, *options, app=None):
        self.options = options
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Resolve the declared directories and hook them into serving and building"""
        app.config.setdefault('PUBLIC_DIRS', [])
        app.config.setdefault('PUBLIC_DIRS_STRICT', False)

        entries = list(self.options) + _config_entries(app.config['PUBLIC_DIRS'])
        report = normalize_options(
            entries,
            app.root_path,
            log=app.logger,
            strict=bool(app.config['PUBLIC_DIRS_STRICT']),
        )

        state = PublicDirsState(
            project_root=app.root_path,
            output_directory=get_output_dir(app),
            native_public_directory=app.static_folder,
            options=report.options,
            dropped=report.dropped,
        )
        app.extensions[EXTENSION_KEY] = state

        # Static assets during dev, checked in declaration order before any route
        for option in state.options:
            app.before_request(make_asset_handler(option, state.native_public_directory))

        build_setup.connect(merge_before_native_copy, app)
        build_done.connect(merge_after_native_copy, app)

        return state
