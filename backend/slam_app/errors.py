"""Domain exceptions and their HTTP mapping.

Services raise these; the handlers registered here turn them into
``{"error": message}`` JSON responses so routes never build error payloads
by hand.
"""

from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from slam_app import db


class SlamError(Exception):
    """Base class for all request-level errors."""
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class NotFoundError(SlamError):
    status_code = 404

    def __init__(self, entity, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(SlamError):
    status_code = 409


class ValidationError(SlamError):
    status_code = 400


class StoreError(SlamError):
    """Persistence failed; the message is generic on purpose."""
    status_code = 500

    def __init__(self, message='Internal storage error'):
        super().__init__(message)


def register_error_handlers(flask_app) -> None:

    @flask_app.errorhandler(SlamError)
    def handle_slam_error(exc):
        if exc.status_code >= 500:
            current_app.logger.error(f"[error] {exc.__class__.__name__}: {exc.message}")
        else:
            current_app.logger.info(f"[rejected] {exc.__class__.__name__}: {exc.message}")
        return jsonify({'error': exc.message}), exc.status_code

    @flask_app.errorhandler(SQLAlchemyError)
    def handle_store_error(exc):
        db.session.rollback()
        current_app.logger.exception(f"[store] unhandled database error: {exc.__class__.__name__}")
        return jsonify({'error': StoreError().message}), 500
