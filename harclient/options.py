"""Client configuration.

Options can be built directly or loaded from ``HARCLIENT_*`` environment
variables with :meth:`ClientOptions.from_env`.
"""

from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass

from harclient.constants import DEFAULT_CHARSET, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

_ENV_PREFIX = 'HARCLIENT_'
_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off', ''})


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f'{_ENV_PREFIX}{name} must be a boolean, got {raw!r}')


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f'{_ENV_PREFIX}{name} must be a number, got {raw!r}') from exc


@dataclass
class ClientOptions:
    """Settings shared by the sync and async HAR clients."""

    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    follow_redirects: bool = False
    default_charset: str = DEFAULT_CHARSET
    capture_content: bool = False
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError('timeout must be positive')
        # The fallback charset must always resolve; declared ones may not.
        try:
            codecs.lookup(self.default_charset)
        except LookupError as exc:
            raise ValueError(f'Unknown default charset: {self.default_charset!r}') from exc

    @classmethod
    def from_env(cls) -> ClientOptions:
        """Load options from environment variables, using defaults for unset ones."""
        options = cls(
            timeout=_env_float('TIMEOUT', DEFAULT_TIMEOUT),
            verify_ssl=_env_bool('VERIFY_SSL', True),
            follow_redirects=_env_bool('FOLLOW_REDIRECTS', False),
            default_charset=os.getenv(_ENV_PREFIX + 'DEFAULT_CHARSET') or DEFAULT_CHARSET,
            capture_content=_env_bool('CAPTURE_CONTENT', False),
            user_agent=os.getenv(_ENV_PREFIX + 'USER_AGENT') or DEFAULT_USER_AGENT,
        )
        logger.debug('Loaded client options from environment: %s', options)
        return options
