import os

from sqlalchemy.engine import make_url


class BaseConfig:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "SQLALCHEMY_DATABASE_URI", "sqlite:///liftmeet.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Live scoring pushes
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "threading")
    SOCKETIO_CORS_ORIGINS = os.environ.get("SOCKETIO_CORS_ORIGINS", "*")

    # Optional bootstrap account for officials
    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")

    @classmethod
    def get_db_path(cls, instance_path: str, db_uri: str | None = None) -> str | None:
        """File backing a SQLite URI, or None for in-memory and server databases."""
        url = make_url(db_uri or cls.SQLALCHEMY_DATABASE_URI)
        if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
            return None
        if os.path.isabs(url.database):
            return url.database
        # Flask-SQLAlchemy resolves bare relative SQLite paths against the instance folder
        return os.path.join(instance_path, url.database)


class DevConfig(BaseConfig):
    DEBUG = True


class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    ADMIN_EMAIL = None
    ADMIN_PASSWORD = None


class ProdConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", BaseConfig.SQLALCHEMY_DATABASE_URI
    )


CONFIGS = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": ProdConfig,
}


def get_config(name: str | None):
    name = name or os.environ.get("FLASK_ENV") or "development"
    return CONFIGS.get(name.lower(), DevConfig)
