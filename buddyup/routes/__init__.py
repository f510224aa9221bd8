from .index import index_bp
from .matching import matching_bp
from .directory import directory_bp
from .errors import register_error_handlers

def register_blueprints(app):
    app.register_blueprint(index_bp)
    app.register_blueprint(matching_bp)
    app.register_blueprint(directory_bp)
    register_error_handlers(app)
