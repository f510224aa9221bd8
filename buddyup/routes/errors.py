from flask import current_app, jsonify

from buddyup.errors import MatchingError

def error_response(message, status_code):
    return jsonify({"success": False, "message": message}), status_code

def register_error_handlers(app):

    @app.errorhandler(MatchingError)
    def handle_matching_error(e):
        current_app.logger.warning("%s: %s", type(e).__name__, e.message)
        return error_response(e.message, e.status_code)
