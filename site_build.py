"""
Static build pipeline for the Flask site.

build_site() writes the site output in three steps:

1. the ``build_setup`` signal is sent (extensions merge their 'before' content)
2. the app's static folder is copied into the output directory
3. the ``build_done`` signal is sent (extensions merge their 'after' content)

Receivers are called with the app as sender and an ``output_dir`` keyword.
Whatever they return is collected into the BuildResult.
"""

import os
import shutil
from dataclasses import dataclass

import click
from blinker import Namespace
from flask import current_app
from flask.cli import with_appcontext

_signals = Namespace()

build_setup = _signals.signal('build-setup')
build_done = _signals.signal('build-done')

DEFAULT_BUILD_DIR = 'dist'


@dataclass(frozen=True)
class BuildResult:
    output_dir: str
    native_copied: bool
    reports: tuple = ()

    @property
    def copied(self):
        return [r for report in self.reports for r in getattr(report, 'copied', [])]

    @property
    def failed(self):
        return [r for report in self.reports for r in getattr(report, 'failed', [])]


def get_output_dir(app, output_dir=None):
    """Absolute output directory; relative values are taken from the app root"""
    output_dir = output_dir or app.config.get('SITE_BUILD_DIR') or DEFAULT_BUILD_DIR
    return os.path.abspath(os.path.join(app.root_path, os.fspath(output_dir)))


def copy_native_public_dir(app, output_dir):
    """Copy the app's static folder into output_dir. Returns False when there is none."""
    static_folder = app.static_folder
    if not static_folder or not os.path.isdir(static_folder):
        return False
    shutil.copytree(static_folder, output_dir, dirs_exist_ok=True)
    return True


def _collect(responses):
    return tuple(value for _, value in responses if value is not None)


def is_within(parent, path):
    """True if path is parent or lies somewhere below it"""
    parent = os.path.abspath(parent)
    try:
        return os.path.commonpath([parent, os.path.abspath(path)]) == parent
    except ValueError:
        # Different drives on Windows
        return False


def _source_dirs(app):
    """Directories whose content a build reads: static folder and registered public dirs"""
    sources = []
    if app.static_folder:
        sources.append(app.static_folder)
    state = app.extensions.get('public_dirs')
    if state is not None:
        sources.extend(option.directory for option in state.options)
    return sources


def _check_clean_target(app, output_dir):
    # output_dir may live inside the project root, never around it
    for path in [app.root_path] + _source_dirs(app):
        if is_within(output_dir, path):
            raise ValueError(f'Refusing to clean {output_dir}: it contains {path}')
    for path in _source_dirs(app):
        if is_within(path, output_dir):
            raise ValueError(f'Refusing to clean {output_dir}: it is inside source directory {path}')


def build_site(app, output_dir=None, clean=False):
    """Build the site into output_dir (default: SITE_BUILD_DIR)"""
    output_dir = get_output_dir(app, output_dir)

    if clean:
        _check_clean_target(app, output_dir)
        if os.path.isdir(output_dir):
            shutil.rmtree(output_dir)
    os.makedirs(output_dir, exist_ok=True)

    with app.app_context():
        reports = _collect(build_setup.send(app, output_dir=output_dir))

        native_copied = copy_native_public_dir(app, output_dir)
        if native_copied:
            app.logger.info(f'Copied static folder into output: {app.static_folder}')

        reports += _collect(build_done.send(app, output_dir=output_dir))

    return BuildResult(output_dir=output_dir, native_copied=native_copied, reports=reports)


@click.command('build')
@click.option('--output', '-o', type=click.Path(file_okay=False), default=None,
              help='Output directory (defaults to SITE_BUILD_DIR).')
@click.option('--clean', is_flag=True, help='Empty the output directory first.')
@with_appcontext
def build_command(output, clean):
    """Build the static site into the output directory."""
    app = current_app._get_current_object()
    try:
        result = build_site(app, output_dir=output, clean=clean)
    except (OSError, shutil.Error, ValueError) as e:
        raise click.ClickException(f'Build failed: {e}')

    for item in result.failed:
        click.echo(f'  warning: {item.error}', err=True)

    click.echo(f'Built site into {result.output_dir} '
               f'({len(result.copied)} public dirs copied, {len(result.failed)} failed)')


def init_app(app):
    app.config.setdefault('SITE_BUILD_DIR', os.path.join(app.root_path, DEFAULT_BUILD_DIR))
    app.cli.add_command(build_command)
