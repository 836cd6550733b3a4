import os

from dotenv import load_dotenv

# Load .env before any setting below reads os.environ.
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes")


class Config:
    APP_NAME = os.getenv("APP_NAME", "Library Catalog API")
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

    DATA_DIR = os.path.join(basedir, "data")
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL", f"sqlite:///{os.path.join(DATA_DIR, 'library.sqlite')}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Create the schema and load seed rows when the app starts.
    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", True)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG = _env_flag("FLASK_DEBUG", False)


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SEED_ON_STARTUP = True
    LOG_LEVEL = "WARNING"
