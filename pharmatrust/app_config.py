# pharmatrust/app_config.py

import os


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_config(app, overrides=None):
    """
    Load all Flask configuration in a clean centralized way.
    Values come from the environment; `overrides` wins over both.
    """
    # ------------------------------
    # Blockchain Settings
    # ------------------------------
    app.config["GANACHE_RPC"] = os.getenv("GANACHE_RPC", "")
    app.config["PRIVATE_KEY"] = os.getenv("PRIVATE_KEY", "")
    app.config["CONTRACT_ADDRESS"] = os.getenv("CONTRACT_ADDRESS", "")
    app.config["CONTRACT_ABI_PATH"] = os.getenv("CONTRACT_ABI_PATH", "PharmaTrustChain.json")
    app.config["CHAIN_TX_TIMEOUT"] = int(os.getenv("CHAIN_TX_TIMEOUT", "180"))

    # ------------------------------
    # Pinata / Frontend
    # ------------------------------
    app.config["PINATA_JWT"] = os.getenv("PINATA_JWT", "")
    app.config["PINATA_API_URL"] = os.getenv("PINATA_API_URL", "https://api.pinata.cloud")
    app.config["FRONTEND_URL"] = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # ------------------------------
    # Database
    # ------------------------------
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL", "sqlite:///pharmadb.sqlite")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SEED_PPB"] = _flag("SEED_PPB", "1")

    # ------------------------------
    # Security Keys / Server
    # ------------------------------
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY", "change-me")
    app.config["PORT"] = int(os.getenv("PORT", "5000"))
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO").upper()

    if overrides:
        app.config.update(overrides)

    app.logger.info("Config loaded (db=%s)", app.config["SQLALCHEMY_DATABASE_URI"])
