# models/user.py
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash


class AdminUser(UserMixin):
    """
    The single back-office account. Credentials come from configuration,
    not from the database.
    """

    def __init__(self, username, password):
        self.username = username
        self.password = password

    @classmethod
    def from_config(cls, config):
        return cls(config['ADMIN_USERNAME'], config['ADMIN_PASSWORD'])

    @property
    def password(self):
        raise AttributeError('password is not a readable attribute')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    def get_id(self):
        return self.username

    def __repr__(self):
        return f'<AdminUser {self.username}>'
