import json
import logging
import os
import tempfile
from typing import Dict, Optional

from lookup import PostGameDetails

log = logging.getLogger(__name__)


class LocalStore:
    """Small string key/value file kept beside the bot, one per deployment."""

    def __init__(self, path: str):
        self.path = path
        self._data: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._data is None:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self._data = {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}
            except FileNotFoundError:
                self._data = {}
            except (OSError, ValueError) as e:
                log.warning("Ignoring unreadable local store %s: %s", self.path, e)
                self._data = {}
        return self._data

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str):
        data = self._load()
        data[key] = value
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=folder, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise


def _keys(device, date_key: str):
    base = f"wordquiz:{device}:{date_key}"
    return f"{base}:completed", f"{base}:details"


def save_completion(store: LocalStore, device, date_key: str, details: PostGameDetails):
    done_key, details_key = _keys(device, date_key)
    store.set(details_key, json.dumps(details.to_dict()))
    store.set(done_key, "true")


def load_completion(store: LocalStore, device, date_key: str) -> Optional[PostGameDetails]:
    details_key = _keys(device, date_key)[1]
    if not is_completed(store, device, date_key):
        return None
    try:
        return PostGameDetails.from_dict(json.loads(store.get(details_key) or ""))
    except (ValueError, KeyError, TypeError) as e:
        log.warning("Cached details for %s on %s are unusable: %s", device, date_key, e)
        return None


def is_completed(store: LocalStore, device, date_key: str) -> bool:
    return store.get(_keys(device, date_key)[0]) == "true"
