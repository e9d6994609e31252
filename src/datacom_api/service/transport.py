from __future__ import annotations

import os

import requests
from requests.adapters import HTTPAdapter


PROXY_URL_ENV_VAR = "DATACOM_API_PROXY_URL"
DEFAULT_HTTP_POOL_SIZE = 8


def resolve_proxy_url(proxy_url: str | None = None) -> str | None:
    if proxy_url is not None:
        value = str(proxy_url).strip()
        return value or None
    env_value = os.getenv(PROXY_URL_ENV_VAR, "").strip()
    return env_value or None


def build_session(
    *,
    proxy_url: str | None,
    user_agent: str | None = None,
) -> requests.Session:
    session = requests.Session()
    if proxy_url:
        session.proxies = {"http": proxy_url, "https": proxy_url}
        session.trust_env = False

    # Failed requests surface to the caller as-is, nothing is retried here.
    adapter = HTTPAdapter(
        max_retries=0,
        pool_connections=DEFAULT_HTTP_POOL_SIZE,
        pool_maxsize=DEFAULT_HTTP_POOL_SIZE,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    if user_agent:
        session.headers.update({"User-Agent": user_agent})
    return session
