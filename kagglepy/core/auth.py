"""
Credential resolution.

Credentials come from one of three sources: the ``KAGGLE_USERNAME`` and
``KAGGLE_KEY`` environment variables, a ``kaggle.json`` config file, or
explicit values. They are resolved once per client and folded into the
``Authorization`` header; nothing else keeps a copy around.
"""
import base64
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .exceptions import CredentialsError

CONFIG_FILE_NAME = 'kaggle.json'


@dataclass(frozen=True)
class Credentials:
    """Kaggle username and API key."""
    user_name: str
    key: str

    def __repr__(self) -> str:
        return f"Credentials(user_name={self.user_name!r}, key='***')"

    @classmethod
    def from_env(cls) -> 'Credentials':
        user_name = os.environ.get('KAGGLE_USERNAME')
        if not user_name:
            raise CredentialsError("KAGGLE_USERNAME env variable not present.")
        key = os.environ.get('KAGGLE_KEY')
        if not key:
            raise CredentialsError("KAGGLE_KEY env variable not present.")
        return cls(user_name=user_name, key=key)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'Credentials':
        path = Path(path)
        if not path.exists():
            raise CredentialsError(f"kaggle config file {path} does not exist")

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except ValueError as e:
            raise CredentialsError(f"kaggle config file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not data.get('username') or not data.get('key'):
            raise CredentialsError(
                f"kaggle config file {path} must contain 'username' and 'key'"
            )
        return cls(user_name=str(data['username']), key=str(data['key']))

    @classmethod
    def from_default_json(cls) -> 'Credentials':
        return cls.from_json(default_config_path())


def default_config_path() -> Path:
    """``$KAGGLE_CONFIG_DIR/kaggle.json`` or ``~/.kaggle/kaggle.json``."""
    config_dir = os.environ.get('KAGGLE_CONFIG_DIR')
    if config_dir:
        return Path(config_dir) / CONFIG_FILE_NAME
    return Path.home() / '.kaggle' / CONFIG_FILE_NAME


class Authentication:
    """
    Where to take credentials from.

    Example:
        >>> Authentication.env()
        >>> Authentication.config_file("~/secrets/kaggle.json")
        >>> Authentication.with_credentials("name", "key")
    """

    ENV = 'env'
    CONFIG_FILE = 'config_file'
    CREDENTIALS = 'credentials'

    def __init__(
        self,
        source: str,
        path: Optional[Path] = None,
        credentials: Optional[Credentials] = None
    ):
        self.source = source
        self.path = path
        self._credentials = credentials

    @classmethod
    def env(cls) -> 'Authentication':
        return cls(cls.ENV)

    @classmethod
    def config_file(cls, path: Optional[Union[str, Path]] = None) -> 'Authentication':
        return cls(cls.CONFIG_FILE, path=Path(path).expanduser() if path else None)

    @classmethod
    def with_credentials(cls, user_name: str, key: str) -> 'Authentication':
        return cls(cls.CREDENTIALS, credentials=Credentials(str(user_name), str(key)))

    @classmethod
    def default(cls) -> 'Authentication':
        return cls.config_file()

    def credentials(self) -> Credentials:
        """Resolve the credentials from this source."""
        if self.source == self.ENV:
            return Credentials.from_env()
        if self.source == self.CONFIG_FILE:
            if self.path is not None:
                return Credentials.from_json(self.path)
            return Credentials.from_default_json()
        if self._credentials is None:
            raise CredentialsError("No credentials supplied")
        return self._credentials

    def __repr__(self) -> str:
        if self.source == self.CONFIG_FILE:
            return f"Authentication.config_file({self.path!r})"
        return f"Authentication.{self.source}()"


def basic_auth_header(user_name: str, key: str) -> str:
    """Build the ``Basic`` authorization header value for a username/key pair."""
    token = base64.b64encode(f"{user_name}:{key}".encode('utf-8')).decode('ascii')
    return f"Basic {token}"
