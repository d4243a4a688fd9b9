import sys
import pytest
from pathlib import Path
from flask import Flask

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import TestingConfig
from public_dirs import PublicDirs
import site_build


def write_file(path, text):
    """Helper function to create a file and its parent directories"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


def make_app(root, *options, **config):
    """
    Create a site app rooted at root.

    static/ is the native public directory; options are handed to PublicDirs,
    extra keyword arguments override app config before the extension runs.
    """
    app = Flask('public_site', root_path=str(root), static_folder='static', static_url_path='')
    app.config.from_object(TestingConfig)
    app.config['SITE_BUILD_DIR'] = str(Path(root) / 'dist')
    app.config.update(config)

    site_build.init_app(app)
    PublicDirs(*options, app=app)
    return app


@pytest.fixture
def project(tmp_path):
    """Create a throwaway site project"""
    root = tmp_path / 'site'
    write_file(root / 'static' / 'index.html', '<h1>native</h1>')
    write_file(root / 'static' / 'robots.txt', 'native robots')
    write_file(root / 'custom' / 'logo.svg', '<svg>custom</svg>')
    write_file(root / 'custom' / 'robots.txt', 'custom robots')
    write_file(root / 'custom' / 'images' / 'banner.svg', '<svg>banner</svg>')
    write_file(root / 'custom' / '@vite' / 'client.js', 'internal')
    write_file(root / 'overrides' / 'robots.txt', 'override robots')
    write_file(root / 'src' / 'assets' / 'font.woff2', 'font')
    return root


@pytest.fixture
def app(project):
    """Site with one 'before' directory and one 'after' directory"""
    return make_app(project, 'custom', {'dir': 'overrides', 'copy': 'after'})


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create test CLI runner"""
    return app.test_cli_runner()


def read(path):
    return Path(path).read_text(encoding='utf-8')


def listing(directory):
    """Relative file paths under directory, POSIX separators"""
    directory = Path(directory)
    return sorted(p.relative_to(directory).as_posix() for p in directory.rglob('*') if p.is_file())
