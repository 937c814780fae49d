"""Validator cache — in-memory LRU of compiled validators keyed by schema content."""

import hashlib
import json
import threading
from collections import OrderedDict
from typing import Any, Optional

import structlog

from link_validator.config import get_settings
from link_validator.schema.models import ConversionWarning
from link_validator.validator import Validator, compile

logger = structlog.get_logger()


def schema_fingerprint(schema: Any) -> str:
    """SHA-256 of the schema's JSON dump. Key order is kept: it fixes error order."""
    encoded = json.dumps(schema, separators=(",", ":"), ensure_ascii=False, default=str)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class ValidatorCache:
    """Bounded LRU cache of compiled validators and their conversion warnings.

    Only successful compiles are cached; compile errors propagate every time.
    """

    def __init__(self, max_size: Optional[int] = None):
        if max_size is None:
            max_size = get_settings().VALIDATOR_CACHE_SIZE
        self.max_size = max_size
        self._entries: OrderedDict[str, tuple[Validator, list[ConversionWarning]]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compile(self, schema: Any) -> tuple[Validator, list[ConversionWarning]]:
        """Return the cached validator for ``schema``, compiling it on a miss."""
        key = schema_fingerprint(schema)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return entry
            self.misses += 1

        warnings: list[ConversionWarning] = []
        validator = compile(schema, on_warning=warnings.append)

        with self._lock:
            self._entries[key] = (validator, warnings)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("validator_evicted", fingerprint=evicted[:12])

        logger.info("validator_cached", fingerprint=key[:12], origin=validator.origin.value, warnings=len(warnings))
        return validator, warnings

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Module-level singleton
validator_cache = ValidatorCache()
