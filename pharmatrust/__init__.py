# pharmatrust/__init__.py

import logging

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from pharmatrust.app_config import load_config
from pharmatrust.blockchain import init_blockchain
from pharmatrust.database import init_db
from pharmatrust.errors import register_error_handlers
from pharmatrust.ipfs import init_pinning
from pharmatrust.register_blueprints import register_all_blueprints


def create_app(config=None, contract_client=None, pinning_client=None):
    """
    Build the Flask app. Clients passed in are used as-is; otherwise they
    are constructed from config and live for the life of the process.
    """
    app = Flask(__name__)

    # -------------------------
    # Config & logging
    # -------------------------
    load_config(app, config)
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    CORS(app, resources={r"/*": {"origins": "*"}})
    JWTManager(app)

    # -------------------------
    # Storage + external clients
    # -------------------------
    init_db(app)
    init_blockchain(app, contract_client)
    init_pinning(app, pinning_client)

    # -------------------------
    # Errors + Blueprints
    # -------------------------
    register_error_handlers(app)
    register_all_blueprints(app)

    return app
