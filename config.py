import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing or unusable."""


class Settings:
    ACCESS_TOKEN_EXPIRE_MINUTES = 15
    REFRESH_TOKEN_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"

    def __init__(
        self,
        jwt_access_secret: str,
        jwt_refresh_secret: str,
        database_url: str,
        bcrypt_rounds: int = 10,
        cors_origins=("*",),
        log_level: str = "INFO",
    ):
        self.jwt_access_secret = jwt_access_secret
        self.jwt_refresh_secret = jwt_refresh_secret
        self.database_url = database_url
        self.bcrypt_rounds = bcrypt_rounds
        self.cors_origins = list(cors_origins)
        self.log_level = log_level


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return (
        f"mysql+pymysql://{os.getenv('MYSQL_USER')}:"
        f"{os.getenv('MYSQL_PASSWORD')}@"
        f"{os.getenv('MYSQL_HOST')}:{os.getenv('MYSQL_PORT')}/"
        f"{os.getenv('MYSQL_DB')}"
    )


def load_settings() -> Settings:
    """
    Read settings from the environment.

    JWT_ACCESS_SECRET and JWT_REFRESH_SECRET have no fallback: a missing or
    shared secret raises ConfigurationError so the server never starts with a
    guessable signing key.
    """
    access_secret = os.getenv("JWT_ACCESS_SECRET")
    refresh_secret = os.getenv("JWT_REFRESH_SECRET")

    missing = [
        name
        for name, value in (("JWT_ACCESS_SECRET", access_secret), ("JWT_REFRESH_SECRET", refresh_secret))
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")
    if access_secret == refresh_secret:
        raise ConfigurationError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")

    try:
        rounds = int(os.getenv("BCRYPT_ROUNDS", "10"))
    except ValueError:
        raise ConfigurationError("BCRYPT_ROUNDS must be an integer")

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    return Settings(
        jwt_access_secret=access_secret,
        jwt_refresh_secret=refresh_secret,
        database_url=_database_url(),
        bcrypt_rounds=rounds,
        cors_origins=origins or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
