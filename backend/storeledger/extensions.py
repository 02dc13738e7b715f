# Overview: Flask extension instances for database and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# The engine and connection pool live on this object; create_app binds it once per process.
db = SQLAlchemy()
migrate = Migrate()
