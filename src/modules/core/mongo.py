"""MongoDB connection helpers."""

from __future__ import annotations

from urllib.parse import quote_plus

from pymongo import MongoClient

MONGO_URL_FORMAT_NO_AUTH = "mongodb://{host}:{port}/{database}?appName={app}"
MONGO_URL_FORMAT = "mongodb://{user}:{password}@{host}:{port}/{database}?appName={app}"


def build_mongo_url(
    host: str,
    port: int,
    database: str,
    app_name: str,
    user: str = "",
    password: str = "",
) -> str:
    """Compose a connection URL from its parts.

    Credentials are only included when both user and password are set.
    Values are not validated.
    """
    if user and password:
        return MONGO_URL_FORMAT.format(
            user=quote_plus(user),
            password=quote_plus(password),
            host=host,
            port=port,
            database=database,
            app=app_name,
        )
    return MONGO_URL_FORMAT_NO_AUTH.format(
        host=host, port=port, database=database, app=app_name
    )


def create_mongo_database(url: str, default_database: str):
    """Return the database named in ``url`` (or ``default_database``).

    The client connects lazily; the first query surfaces connection errors.
    """
    client = MongoClient(url, tz_aware=True)
    return client.get_default_database(default=default_database)
