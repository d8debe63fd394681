import os
import sys
from flask import Flask

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "engine"))

from config import FLASK_HOST, FLASK_PORT, FLASK_DEBUG, MAX_UPLOAD_MB, validate_config
from routes import register_routes


def create_app(policy=None):
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_MB * 1024 * 1024
    register_routes(app, policy)
    return app


if __name__ == "__main__":
    validate_config()
    app = create_app()
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)
