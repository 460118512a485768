"""Bearer token storage and verification for the relay."""

import hmac
import logging
import os
import secrets
from pathlib import Path
from typing import Optional

from fastapi import Header, HTTPException

from .config import get_data_dir

logger = logging.getLogger(__name__)

TOKEN_ENV = "ATELIER_TOKEN"


def default_token_path() -> Path:
    return get_data_dir() / "token"


def save_token(path: Path, token: str) -> None:
    path = Path(path).expanduser()
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    path.write_text(token, encoding="utf-8")
    path.chmod(0o600)


def generate_token() -> str:
    return secrets.token_hex(16)


def load_or_create_token(path: Optional[Path] = None) -> str:
    """Return the relay token.

    ATELIER_TOKEN wins over the token file. When neither exists a new token
    is generated and written to ``path``.
    """
    env = os.environ.get(TOKEN_ENV)
    if env:
        return env

    path = Path(path or default_token_path()).expanduser()
    try:
        token = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        token = ""
    if token:
        return token

    token = generate_token()
    save_token(path, token)
    logger.info("Generated new relay token at %s", path)
    return token


def bearer_auth(token: str):
    """Return a FastAPI dependency that checks ``Authorization: Bearer``."""

    async def require_token(authorization: Optional[str] = Header(None)) -> None:
        if not authorization:
            raise HTTPException(status_code=401, detail="Missing Authorization header")
        scheme, _, value = authorization.partition(" ")
        if scheme != "Bearer" or not value or " " in value:
            raise HTTPException(status_code=401, detail="Invalid Authorization header format")
        if not hmac.compare_digest(value.encode(), token.encode()):
            raise HTTPException(status_code=401, detail="Invalid token")

    return require_token
