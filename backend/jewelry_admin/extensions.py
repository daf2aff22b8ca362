# Overview: Flask extension instances for database, migrations, image storage and the lookup cache.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

from .cache import LookupCache
from .storage import ImageStore

db = SQLAlchemy()
migrate = Migrate()
images = ImageStore()
lookup_cache = LookupCache()
