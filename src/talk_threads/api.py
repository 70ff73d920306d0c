"""DiscussionTools API client with optional caching."""

import hashlib
import json
from pathlib import Path
from typing import Any

import requests
from loguru import logger

from talk_threads.config import (
    API_CACHE_PREFIX,
    API_PATH,
    DEFAULT_SITE,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from talk_threads.errors import ApiError, PayloadError
from talk_threads.models.thread_item import ThreadItem


class DiscussionToolsApi:
    """Fetch talk page threads from a MediaWiki site's Action API."""

    def __init__(self, site: str = DEFAULT_SITE, *, from_cache: bool = False) -> None:
        self.site = site
        self.from_cache = from_cache
        self.sess = requests.Session()
        self.sess.headers["User-Agent"] = USER_AGENT

        self.api_cache_prefix: str | None = API_CACHE_PREFIX
        if not self.from_cache:
            self.api_cache_prefix = None

        logger.debug(
            "API ready: site {!r}, from_cache {!r}, api_cache_prefix {!r}",
            self.site,
            self.from_cache,
            self.api_cache_prefix,
        )

        if self.api_cache_prefix:
            Path(self.api_cache_prefix).parent.mkdir(parents=True, exist_ok=True)

    @property
    def endpoint(self) -> str:
        return f"https://{self.site}{API_PATH}"

    def call(self, params: dict[str, Any]) -> dict[str, Any]:
        """Invoke the Action API with ``params``, return json.

        Raises:
            ApiError: On transport/HTTP failure or an API-reported error.
        """
        params = {"format": "json", "formatversion": 2, **params}
        params_str = json.dumps(params, sort_keys=True, separators=(",", ":"))
        name_last = self.site + "--" + hashlib.sha1(params_str.encode("utf-8")).hexdigest()

        log_name: str | None = None
        if self.api_cache_prefix:
            log_name = self.api_cache_prefix + name_last

            if self.from_cache and Path(log_name).exists():
                logger.debug("Filled from cache: {!r}", log_name)
                with open(log_name, encoding="utf-8") as f:
                    return json.load(f)  # type: ignore[no-any-return]

        logger.debug("Making request: {} {}", self.endpoint, repr(params)[:64])

        try:
            r = self.sess.get(self.endpoint, params=params, timeout=REQUEST_TIMEOUT)
            r.raise_for_status()
            rv: dict[str, Any] = r.json()
        except (requests.RequestException, ValueError) as e:
            msg = f"API request failed: {self.endpoint} {params!r}: {e}"
            raise ApiError(msg) from e

        if not isinstance(rv, dict):
            msg = f"API response is not an object: {type(rv).__name__}"
            raise PayloadError(msg)
        if "error" in rv:
            error = rv["error"]
            if isinstance(error, dict):
                msg = f"API call failed: {params!r} -> ({error.get('code')!r}, {error.get('info')!r})"
            else:
                msg = f"API call failed: {params!r} -> {error!r}"
            raise ApiError(msg)
        if self.api_cache_prefix and log_name:
            with open(log_name, "w", encoding="utf-8") as f:
                f.write(r.text)

        return rv

    def fetch_topics(self, page_title: str) -> list[ThreadItem]:
        """Return the top-level thread items (topics) of a talk page."""
        rv = self.call(
            {
                "action": "discussiontoolspageinfo",
                "page": page_title,
                "prop": "threaditemshtml",
            }
        )
        try:
            raw_threads = rv["discussiontoolspageinfo"]["threaditemshtml"]
        except (KeyError, TypeError) as e:
            msg = f"Unexpected discussiontoolspageinfo response for {page_title!r}: {sorted(rv)!r}"
            raise PayloadError(msg) from e
        if not isinstance(raw_threads, list):
            msg = f"threaditemshtml for {page_title!r} is not a list"
            raise PayloadError(msg)

        topics = [ThreadItem.from_dict(t) for t in raw_threads]
        logger.debug("Fetched {} topics from {!r}", len(topics), page_title)
        return topics
