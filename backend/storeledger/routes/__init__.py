# Overview: Shared JSON error responses for the API blueprints.

from flask import jsonify

from ..errors import InternalError, LedgerError


def error_response(exc: LedgerError):
    return jsonify(exc.to_dict()), exc.status_code


def internal_error_response():
    return jsonify(InternalError("Internal server error").to_dict()), 500
