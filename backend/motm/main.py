from flask import Blueprint, request, jsonify, current_app
from flask_login import UserMixin, login_user, logout_user, current_user
from motm import bcrypt

main = Blueprint('main', __name__)


class AdminUser(UserMixin):
    """The single club admin; there are no per-user accounts."""
    id = 'admin'

    def to_dict(self):
        return {'id': self.id}


@main.route('/health')
def health():
    return jsonify({'ok': True})


@main.route('/admin/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    password = data.get('password') or ''
    if bcrypt.check_password_hash(current_app.config['ADMIN_PASSWORD_HASH'], password):
        login_user(AdminUser(), remember=True)
        current_app.logger.info("[admin-login] success")
        return jsonify({'success': True})
    current_app.logger.warning("[admin-login] invalid password")
    return jsonify({'error': 'Invalid password', 'code': 'unauthorized'}), 401


@main.route('/admin/logout', methods=['POST'])
def logout():
    logout_user()
    return jsonify({'success': True})


@main.route('/admin/check')
def check_login():
    return jsonify({'is_authenticated': bool(current_user.is_authenticated)})
