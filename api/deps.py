"""
API Dependencies

Dependency injection for the API.
Provides the runtime configuration and an integrity store over the
configured root log.
"""

from __future__ import annotations

import logging

from fastapi import Depends

from core.config import RuntimeConfig, load_config
from core.integrity import IntegrityStore

logger = logging.getLogger(__name__)


def get_runtime_config() -> RuntimeConfig:
    """
    Load RuntimeConfig from the config file search path, then overlay
    environment variables.

    Search order for config file:
      1. ./reviewproof.json
      2. ./.reviewproof.json
      3. ~/.config/reviewproof/config.json
    """
    return load_config()


def get_integrity_store(config: RuntimeConfig = Depends(get_runtime_config)) -> IntegrityStore:
    """
    IntegrityStore bound to the configured root log.

    The log is read on every request, so roots appended by the CLI are
    visible without a restart. A missing log yields an empty store.
    """
    store = IntegrityStore(config.storage.root_log_path)
    if store.log_path is not None and store.log_path.exists():
        store.load()
    else:
        logger.debug(f"Root log {store.log_path} does not exist yet")
    return store
