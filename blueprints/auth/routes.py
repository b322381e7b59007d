"""
Authentication routes: login, logout, current user.
Admin console sessions are handled by Flask-Login.
"""

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_username, update_last_login, check_password
from utils.api_response import api_success, api_error, api_validation_error
from utils.messages import MESSAGES, get_message

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Process login credentials.

    Returns:
        200 with the user, 400 on missing fields, 401 on bad credentials,
        403 for a disabled account
    """
    form = LoginForm()

    if not form.validate_on_submit():
        return api_validation_error(
            {field: messages[0] for field, messages in form.errors.items()},
            MESSAGES['invalid_request']
        )

    user_dict = get_user_by_username(form.username.data)

    if user_dict is None or not check_password(user_dict, form.password.data):
        return api_error(MESSAGES['invalid_credentials'], 401)

    if not user_dict.get('active'):
        return api_error(MESSAGES['account_disabled'], 403)

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)

    return api_success(
        data=user.to_dict(),
        message=get_message('login_success', name=user.full_name or user.username)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout current user."""
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me')
@login_required
def me():
    """Current user details."""
    return api_success(data=current_user.to_dict())


@auth_bp.route('/csrf-token')
def csrf_token():
    """CSRF token for JSON clients (send back as X-CSRFToken)."""
    return api_success(data={'csrf_token': generate_csrf()})
