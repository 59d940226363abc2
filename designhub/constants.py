from __future__ import annotations

import logging

HTTP_METHODS = {
    "get",
    "post",
    "put",
    "patch",
    "delete",
    "options",
    "head",
}

LOGGER = logging.getLogger("designhub.client")
APP_VERSION = "0.1.0"
USER_AGENT = f"designhub-client/{APP_VERSION}"

DEFAULT_TIMEOUT = 30.0
DEFAULT_TOKEN_STORE_PATH = ".designhub-session.json"
BODY_LOG_LIMIT = 1000
