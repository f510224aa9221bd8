from dotenv import load_dotenv

load_dotenv()

from buddyup import create_app
from buddyup.extensions import db
from buddyup.routes import register_blueprints

api = create_app()

# Register all Blueprints (index, matching, directory) + JSON error handlers
register_blueprints(api)

def init_db():
    """Ensure DB tables exist."""
    db.create_all()

# Run DB bootstrap once at startup
with api.app_context():
    init_db()

if __name__ == "__main__":
    api.run(debug=True)
