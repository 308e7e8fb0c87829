# models/__init__.py
import uuid
from datetime import datetime

from .. import db


def generate_id():
    return str(uuid.uuid4())


class BaseModel(db.Model):
    """
    Base model with common fields for all models
    """
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    created_at = db.Column(db.DateTime, default=datetime.now)

    def save(self):
        """
        Save the current model instance to the database.
        If an exception occurs, rollback the session to maintain session consistency.
        """
        try:
            db.session.add(self)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            raise e

    def delete(self):
        """
        Delete the current model instance, together with anything it cascades to,
        in a single commit
        """
        try:
            db.session.delete(self)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            raise e

    @classmethod
    def get_by_id(cls, id):
        """
        Retrieve a model instance by its ID

        Args:
            id (str): Primary key of the model instance

        Returns:
            Model instance or None
        """
        return db.session.get(cls, id)


# Import order matters
from .client import Client
from .record import Record
