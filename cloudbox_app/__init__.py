# cloudbox_app/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from datetime import datetime
from typing import Mapping, Optional

from flask import Flask, jsonify
from config import Config, TestingConfig, StagingConfig, ProductionConfig
from .errors import CloudboxError, error_payload
from .extensions import init_extensions, init_scheduler, register_cli
from .services.blob_store import init_blob_store
from .blueprints.auth import bp as auth_bp
from .blueprints.folders import bp as folders_bp
from .blueprints.files import bp as files_bp
from .blueprints.shares import bp as shares_bp

_ENV_CONFIGS = {
    "testing": TestingConfig,
    "staging": StagingConfig,
    "production": ProductionConfig,
}

def create_app(config_object: Optional[type[Config]] = None,
               overrides: Optional[Mapping] = None) -> Flask:
    app = Flask(__name__)
    if config_object is None:
        config_object = _ENV_CONFIGS.get(os.getenv("APP_ENV", "").lower(), Config)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    # Extensions (DB/Bcrypt/Migrate)
    init_extensions(app)

    # Blob store, available at app.extensions["blob_store"]
    init_blob_store(app)
    app.config["STARTED_AT"] = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")

    # Blueprints
    prefix = app.config.get("API_PREFIX", "/api")
    app.register_blueprint(auth_bp, url_prefix=prefix)
    app.register_blueprint(folders_bp, url_prefix=prefix)
    app.register_blueprint(files_bp, url_prefix=prefix)
    app.register_blueprint(shares_bp, url_prefix=prefix)

    @app.errorhandler(CloudboxError)
    def handle_cloudbox_error(exc: CloudboxError):
        return jsonify(error_payload(exc)), exc.status_code

    # CLI (ex.: flask init-db)
    register_cli(app)

    # Scheduler (expired share reaper)
    if not app.config.get("TESTING") and os.getenv("DISABLE_SCHEDULER") != "1":
        init_scheduler(app)

    return app
