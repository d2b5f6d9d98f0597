import logging
import re

from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, current_user, login_required
from flask_wtf.csrf import generate_csrf
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.user import User
from routes.utils import text_field

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account and log it in"""
    data = request.get_json(silent=True) or {}
    name = text_field(data, 'name')
    email = text_field(data, 'email').lower()
    password = text_field(data, 'password', strip=False)

    if not all([name, email, password]):
        return jsonify({'error': 'Name, email and password are required'}), 400

    if not _EMAIL_RE.match(email):
        return jsonify({'error': 'Invalid email address'}), 400

    if len(password) < 6:
        return jsonify({'error': 'Password must be at least 6 characters'}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already registered'}), 400

    user = User(name=name, email=email)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Email already registered'}), 400

    login_user(user, remember=True)
    logger.info("Registered user %s", user.id)
    return jsonify({'success': True, 'user': user.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = text_field(data, 'email').lower()
    password = text_field(data, 'password', strip=False)

    if not all([email, password]):
        return jsonify({'error': 'Email and password are required'}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return jsonify({'error': 'Invalid email or password'}), 401

    login_user(user, remember=True)
    return jsonify({'success': True, 'user': user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True, 'message': 'You have been logged out.'})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'user': current_user.to_dict()})


@auth_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    """Token the UI sends back in the X-CSRFToken header"""
    return jsonify({'csrfToken': generate_csrf()})
