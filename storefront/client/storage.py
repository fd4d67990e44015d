# storefront/client/storage.py
import json
import os
from typing import Any, Dict, List

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import CART_STORAGE_NAMESPACE, CART_STORAGE_PATH, REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Records = List[Dict[str, Any]]


class FileCartStorage:
    """
    Trwaly lokalny zapis koszyka - plik JSON, klucz = namespace.
    Inne namespace'y w tym samym pliku zostaja nietkniete.
    """

    def __init__(self, path: str | None = None, namespace: str | None = None):
        self.path = path or CART_STORAGE_PATH
        self.namespace = namespace or CART_STORAGE_NAMESPACE

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable cart storage {self.path}, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> Records:
        records = self._read_all().get(self.namespace, [])
        return records if isinstance(records, list) else []

    def save(self, records: Records) -> None:
        data = self._read_all()
        data[self.namespace] = records

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # atomic replace
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self.path)


class RedisCartStorage:
    """Ten sam kontrakt co FileCartStorage, koszyk pod kluczem `namespace` w redisie."""

    def __init__(self, url: str | None = None, namespace: str | None = None, client: Any = None):
        self.redis = client if client is not None else redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.namespace = namespace or CART_STORAGE_NAMESPACE

    @redis_retry()
    def load(self) -> Records:
        raw = self.redis.get(self.namespace)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except ValueError:
            logger.warning(f"Corrupted cart under {self.namespace}, starting empty")
            return []
        return records if isinstance(records, list) else []

    @redis_retry()
    def save(self, records: Records) -> None:
        self.redis.set(self.namespace, json.dumps(records))
