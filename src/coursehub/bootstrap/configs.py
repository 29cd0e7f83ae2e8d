from dataclasses import dataclass
from os import environ
from typing import Literal

from coursehub.infrastructure.log.main import LoggingLevel

Environment = Literal["development", "production", "test"]

DEV_SECRET_KEY = "coursehub-development-secret"  # noqa: S105


@dataclass
class MissingDatabaseConfigError(ValueError):

    @property
    def title(self) -> str:
        return "Required MongoDB environment variables are missing"


@dataclass
class MissingSecretKeyError(ValueError):

    @property
    def title(self) -> str:
        return "JWT_SECRET must be set in production"


@dataclass(frozen=True)
class MongoDBConfig:
    uri: str
    db_name: str
    connect_retries: int = 3
    retry_delay: float = 5.0
    server_selection_timeout_ms: int = 10_000


@dataclass(frozen=True)
class AuthConfig:
    secret_key: str
    expire_days: int = 30
    cookie_name: str = "authToken"
    cookie_secure: bool = False


@dataclass(frozen=True)
class PaymentConfig:
    secret_key: str | None = None
    api_base: str = "https://api.stripe.com"
    currency: str = "gbp"


@dataclass(frozen=True)
class Config:
    auth: AuthConfig
    # None means no MongoDB settings were given
    database: MongoDBConfig | None = None
    payments: PaymentConfig = PaymentConfig()
    environment: Environment = "development"
    log_level: LoggingLevel = "INFO"
    seed_demo_data: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _flag(name: str, default: bool = False) -> bool:
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_environment() -> Environment:
    value = environ.get("APP_ENV", "development").strip().lower()
    if value not in ("development", "production", "test"):
        raise ValueError(f"Unknown APP_ENV: {value}")
    return value  # type: ignore[return-value]


def load_database_config(environment: Environment) -> MongoDBConfig | None:
    uri = environ.get("MONGODB_URI")
    if uri is None:
        host = environ.get("MONGO_HOST")
        port = environ.get("MONGO_PORT")
        user = environ.get("MONGO_INITDB_ROOT_USERNAME")
        password = environ.get("MONGO_INITDB_ROOT_PASSWORD")

        if host is None or port is None:
            if environment == "production":
                raise MissingDatabaseConfigError
            return None

        credentials = f"{user}:{password}@" if user and password else ""
        uri = f"mongodb://{credentials}{host}:{int(port)}/"

    return MongoDBConfig(
        uri=uri,
        db_name=environ.get("MONGO_DB_NAME", "coursehub"),
        connect_retries=int(environ.get("MONGO_CONNECT_RETRIES", "3")),
        retry_delay=float(environ.get("MONGO_RETRY_DELAY", "5")),
        server_selection_timeout_ms=int(
            environ.get("MONGO_SERVER_SELECTION_TIMEOUT_MS", "10000"),
        ),
    )


def load_auth_config(environment: Environment) -> AuthConfig:
    secret_key = environ.get("JWT_SECRET")
    if not secret_key:
        if environment == "production":
            raise MissingSecretKeyError
        secret_key = DEV_SECRET_KEY

    return AuthConfig(
        secret_key=secret_key,
        expire_days=int(environ.get("JWT_EXPIRE_DAYS", "30")),
        cookie_name=environ.get("AUTH_COOKIE_NAME", "authToken"),
        cookie_secure=_flag(
            "AUTH_COOKIE_SECURE",
            default=environment == "production",
        ),
    )


def load_payment_config() -> PaymentConfig:
    return PaymentConfig(
        secret_key=environ.get("STRIPE_SECRET_KEY") or None,
        api_base=environ.get("STRIPE_API_BASE", "https://api.stripe.com"),
        currency=environ.get("PAYMENT_CURRENCY", "gbp").lower(),
    )


def load_settings() -> Config:
    environment = load_environment()
    return Config(
        auth=load_auth_config(environment),
        database=load_database_config(environment),
        payments=load_payment_config(),
        environment=environment,
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),  # type: ignore[arg-type]
        seed_demo_data=_flag("SEED_DEMO_DATA"),
    )
