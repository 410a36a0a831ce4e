from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS') or '*')

    # Hash the configured admin password once so logins compare against a bcrypt hash
    if not flask_app.config.get('ADMIN_PASSWORD_HASH'):
        flask_app.config['ADMIN_PASSWORD_HASH'] = bcrypt.generate_password_hash(
            flask_app.config.get('ADMIN_PASSWORD', '')
        ).decode('utf-8')

    # Import and register blueprints here
    from motm.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from motm.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    _register_error_handlers(flask_app)

    from motm.main import AdminUser

    @login_manager.user_loader
    def load_user(user_id):
        return AdminUser() if user_id == AdminUser.id else None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Unauthorized', 'code': 'unauthorized'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from motm.services.voting.store import create_game
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            game = create_game(
                date='2025-09-13',
                opponents='Wimbledon 3s',
                team_sheet=['Alex', 'Billie', 'Charlie', 'Dani', 'Eddie'],
                moments=['Last-minute short corner', 'Double save on the line'],
            )
            print(f'Database has been reset and seeded with game {game.id}!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app


def _register_error_handlers(flask_app):
    from motm.services.voting.errors import VotingError

    @flask_app.errorhandler(VotingError)
    def handle_voting_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        code = (exc.name or 'error').lower().replace(' ', '_')
        return jsonify({'error': exc.description, 'code': code}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        flask_app.logger.exception(f"[internal-error] {type(exc).__name__}")
        return jsonify({'error': 'Internal server error', 'code': 'internal_error'}), 500
