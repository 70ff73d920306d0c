"""Configuration constants for talk-threads."""

# Wiki used when no --site is given.
DEFAULT_SITE: str = "en.wikipedia.org"

# Action API endpoint, relative to the site.
API_PATH: str = "/w/api.php"

# Wikimedia asks API clients to identify themselves.
USER_AGENT: str = "talk-threads/0.1 (https://github.com/talk-threads/talk-threads)"

# Seconds before an API request is abandoned.
REQUEST_TIMEOUT: float = 30.0

# Cache prefix, used only when --cache is passed.
API_CACHE_PREFIX: str | None = "/tmp/talk-threads-cache/cache-"

# Log line layout for the CLI (loguru format string).
LOG_FORMAT: str = "{level.icon} {name}: {message}"
