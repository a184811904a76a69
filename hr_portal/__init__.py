# hr_portal/__init__.py
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from config import config

db = SQLAlchemy()
migrate = Migrate()


def create_app(config_name='default'):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])
    os.makedirs(app.instance_path, exist_ok=True)

    # Initialize app-specific configuration (logging, etc.)
    config[config_name].init_app(app)

    db.init_app(app)
    migrate.init_app(app, db, directory=app.config.get('MIGRATION_DIR'))

    # --- Register Blueprints ---
    from .attendance import bp as attendance_bp
    app.register_blueprint(attendance_bp)

    from .holidays import bp as holidays_bp
    app.register_blueprint(holidays_bp)

    from .payroll import bp as payroll_bp
    app.register_blueprint(payroll_bp)

    # --- Register Error Handlers ---
    from .exceptions import PortalError

    @app.errorhandler(PortalError)
    def portal_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'message': 'Not found.'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'message': 'Internal server error.'}), 500

    return app
