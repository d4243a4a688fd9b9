import os
from pathlib import Path

basedir = Path(__file__).parent.absolute()


def env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_public_dirs():
    """PUBLIC_DIRS env var: directories separated by os.pathsep (':' on POSIX, ';' on Windows)"""
    value = os.environ.get('PUBLIC_DIRS', '')
    return [d.strip() for d in value.split(os.pathsep) if d.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Extra public directories, each a path string or a mapping
    # {'dir': ..., 'cwd': './', 'copy': 'before' | 'after', 'log': 'verbose' | 'minimal' | bool}
    PUBLIC_DIRS = env_public_dirs()

    # Abort startup when a declared directory is missing instead of skipping it
    PUBLIC_DIRS_STRICT = env_flag('PUBLIC_DIRS_STRICT')

    # Where `flask build` writes the site
    SITE_BUILD_DIR = Path(os.environ.get('SITE_BUILD_DIR') or basedir / 'dist')


class DevelopmentConfig(Config):
    DEBUG = True
    # Playground directory, unless PUBLIC_DIRS is set in the environment
    if not Config.PUBLIC_DIRS:
        PUBLIC_DIRS = [
            {
                'dir': 'custom',
                'log': 'verbose',
            },
        ]


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    PUBLIC_DIRS = []
    PUBLIC_DIRS_STRICT = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
