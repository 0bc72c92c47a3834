import os
from typing import Any, Dict, Optional

_SERVER_CONFIG: Dict[str, Any] = {}

DEFAULT_TOKEN_TTL_SECONDS = 60 * 60


def get_server_secret(key: str, default: Optional[Any] = None) -> Any:
    """Read a server-side secret. Precedence: loaded Mongo config -> environment -> default.
    Do not expose these to clients.
    """
    if key in _SERVER_CONFIG:
        return _SERVER_CONFIG[key]
    return os.getenv(key, default)  # type: ignore[no-any-return]


DEV_TOKEN_SECRET = "dev-secret-change-me"


def access_token_secret() -> str:
    return str(get_server_secret("ACCESS_WEB_TOKEN", DEV_TOKEN_SECRET))


def access_token_secret_configured() -> bool:
    return bool(get_server_secret("ACCESS_WEB_TOKEN"))


def access_token_ttl_seconds() -> int:
    raw = get_server_secret("ACCESS_TOKEN_TTL_SECONDS", DEFAULT_TOKEN_TTL_SECONDS)
    try:
        return int(raw)
    except (TypeError, ValueError):
        return DEFAULT_TOKEN_TTL_SECONDS


async def load_server_config_from_mongo(mdb) -> None:
    """Load server config from MongoDB into memory if available.
    The expected document shape (collection: config, id: 'runtime'):
      { _id: 'runtime', server: { KEY: VALUE, ... } }
    """
    if mdb is None:
        return
    coll = mdb["config"]
    doc = await coll.find_one({"_id": "runtime"})
    if not doc:
        return
    server = doc.get("server") or {}
    if isinstance(server, dict):
        # Merge into memory; prefer Mongo values
        _SERVER_CONFIG.update(server)


def reset_server_config() -> None:
    _SERVER_CONFIG.clear()
