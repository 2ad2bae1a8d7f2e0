"""Project defaults for blockport.

Every value here can be overridden through a YAML config file, environment
variables or CLI flags (see :mod:`blockport.config`).
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem layout (relative to the working directory)
# ---------------------------------------------------------------------------
CONTENT_DIR = "content"
CATALOG_PATH = "tools/importer/url-catalog.json"
REPORT_PATH = "tools/importer/import-results.json"

# ---------------------------------------------------------------------------
# Crawl politeness
# ---------------------------------------------------------------------------
# Fixed pause between two consecutive pages of a batch (seconds).
DOWNLOAD_DELAY = 0.5

DOWNLOAD_TIMEOUT = 30

# urllib follows redirects itself; this caps the chain length.
MAX_REDIRECTS = 10

# ---------------------------------------------------------------------------
# User-agent
# ---------------------------------------------------------------------------
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# ---------------------------------------------------------------------------
# Output validation
# ---------------------------------------------------------------------------
# Markdown shorter than this many characters counts as a failed page.
MIN_MARKDOWN_LENGTH = 50

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------
# Used for --url runs when the URL is not listed in any catalog batch.
FALLBACK_TEMPLATE = "blog-article"

# Link target of the "View all resources" call-to-action.
RESOURCES_INDEX_PATH = "/resources/"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(message)s"
