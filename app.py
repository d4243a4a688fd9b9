from flask import Flask, send_from_directory
from config import config
from extensions import public_dirs
import site_build
import os


def create_app(config_name='default'):
    # Static folder is the site's native public directory, served from "/"
    app = Flask(__name__, static_folder='static', static_url_path='')
    app.config.from_object(config[config_name])

    # Initialize extensions
    site_build.init_app(app)
    public_dirs.init_app(app)

    @app.route('/')
    def index():
        return send_from_directory(app.static_folder, 'index.html')

    return app


# Create app instance for `flask --app app run` / `flask --app app build`
app = create_app(os.environ.get('FLASK_ENV', 'production'))

if __name__ == '__main__':
    # Development server
    app = create_app('development')
    app.run(debug=True, host='127.0.0.1', port=4321)
