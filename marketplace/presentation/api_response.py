"""
Uniform JSON response envelope

Every endpoint answers with ``{success, code, message, data, error}`` and
an HTTP status equal to ``code``.
"""

from flask import current_app, jsonify


class ApiResponse:

    @staticmethod
    def _build(success, code, message, data, error):
        body = {
            'success': success,
            'code': code,
            'message': message,
            'data': data,
            'error': error,
        }
        return jsonify(body), code

    @classmethod
    def success(cls, code=200, message="Success", data=None):
        return cls._build(True, code, message, data, None)

    @classmethod
    def error(cls, code=400, message="Error", error="ERROR", data=None):
        return cls._build(False, code, message, data, error)

    @classmethod
    def from_exception(cls, exc, code=500, message="Internal Server Error"):
        """
        Error response for an unexpected exception.

        Exception name and message are only exposed outside production.
        """
        if current_app.config.get('APP_ENV') == 'production':
            detail = "server_error"
        else:
            detail = {
                'reason': 'server_error',
                'name': type(exc).__name__,
                'message': str(exc),
            }
        return cls._build(False, code, message, None, detail)
