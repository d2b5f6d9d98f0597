from dotenv import load_dotenv
load_dotenv()  # Load .env file before anything else

import logging

from flask import Flask, request, jsonify
from config import config
from extensions import db, login_manager, csrf
from services.errors import StudyPlannerError, Unauthenticated
from services.gemini_service import init_gemini_service

logger = logging.getLogger(__name__)


def create_app(config_name='development'):
    """Application factory"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    csrf.init_app(app)

    # API-only app: unauthenticated requests get JSON, never a redirect
    @login_manager.unauthorized_handler
    def unauthorized():
        error = Unauthenticated('Unauthorized - Please log in')
        return jsonify({**error.to_dict(), 'login_required': True}), error.status_code

    @login_manager.user_loader
    def load_user(user_id):
        from models.user import User
        return db.session.get(User, int(user_id))

    # Register blueprints
    from routes.auth_routes import auth_bp
    from routes.exam_routes import exam_bp
    from routes.study_routes import study_bp
    from routes.quiz_routes import quiz_bp
    from routes.note_routes import note_bp
    from routes.task_routes import task_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(exam_bp, url_prefix='/api/exams')
    app.register_blueprint(study_bp, url_prefix='/api')
    app.register_blueprint(quiz_bp, url_prefix='/api')
    app.register_blueprint(note_bp, url_prefix='/api/notes')
    app.register_blueprint(task_bp, url_prefix='/api/tasks')

    # Create tables - needs app_context and the models imported
    with app.app_context():
        import models.user  # noqa: F401
        import models.study  # noqa: F401
        db.create_all()

    init_gemini_service(app)

    @app.errorhandler(StudyPlannerError)
    def planner_error(error):
        if error.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error("Unhandled error on %s %s: %s", request.method, request.path, error)
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok', 'aiConfigured': app.extensions.get('completion_client') is not None})

    return app
