from flask import Blueprint, jsonify

index_bp = Blueprint("index", __name__)

@index_bp.route("/")
def index():
    return jsonify({"status": "ok", "service": "buddyup-matching", "version": "1.0.0"})
