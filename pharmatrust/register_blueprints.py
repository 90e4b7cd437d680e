"""
Centralized Blueprint Registration
All blueprints MUST be registered inside register_all_blueprints(app)
"""

def register_all_blueprints(app):

    # Root
    from pharmatrust.routes.root.root_routes import root_bp
    app.register_blueprint(root_bp)

    # Batch registry proxy
    from pharmatrust.routes.batch.batch_routes import batch_bp
    app.register_blueprint(batch_bp)

    # Signup / login / status
    from pharmatrust.routes.auth.auth_routes import auth_bp
    app.register_blueprint(auth_bp)

    # Admin approval workflow
    from pharmatrust.routes.admin.admin_routes import admin_bp
    app.register_blueprint(admin_bp)

    # PPB registry mirror
    from pharmatrust.routes.registry.ppb_routes import ppb_bp
    app.register_blueprint(ppb_bp)

    # Pinata
    from pharmatrust.routes.ipfs.pinata_routes import pinata_bp
    app.register_blueprint(pinata_bp)

    app.logger.info("All blueprints registered")
