"""File-backed credential store.

Secrets live in a single JSON object on disk. Concurrency:
- Cross-process exclusion via ``filelock`` on a sibling ``.lock`` file
- Atomic writes (temp+fsync+rename)
- Blocking file I/O off-loaded with ``asyncio.to_thread``
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from filelock import FileLock, Timeout

from switchyard.core.credentials.base import CredentialStore
from switchyard.core.observability import audit_log

logger = logging.getLogger(__name__)

LOCK_ACQUISITION_TIMEOUT = 10.0


class FileCredentialStore(CredentialStore):
    """JSON credential file guarded by a file lock."""

    def __init__(
        self,
        path: Union[str, Path],
        lock_timeout: float = LOCK_ACQUISITION_TIMEOUT,
    ):
        self.path = Path(path).expanduser()
        self.lock_timeout = lock_timeout

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    async def get(self, name: str) -> Optional[str]:
        return await asyncio.to_thread(self._read_secret, name)

    async def set(self, name: str, secret: str) -> bool:
        return await asyncio.to_thread(self._write_secret, name, secret)

    # =========================================================================
    # Blocking helpers (run in a worker thread)
    # =========================================================================

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return {str(k): str(v) for k, v in data.items()}

    def _read_secret(self, name: str) -> Optional[str]:
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                return self._load().get(name)
        except (OSError, ValueError, Timeout) as e:
            logger.error("Failed to read credential %s from %s: %s", name, self.path, e)
            return None

    def _write_secret(self, name: str, secret: str) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with FileLock(self.lock_path, timeout=self.lock_timeout):
                data = self._load()
                data[name] = secret

                # Atomic write: temp file + fsync + rename
                fd, temp_path = tempfile.mkstemp(
                    dir=self.path.parent,
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(data, f, indent=2, sort_keys=True)
                        f.flush()
                        os.fsync(f.fileno())
                    os.replace(temp_path, self.path)
                except Exception:
                    try:
                        os.unlink(temp_path)
                    except OSError:
                        pass
                    raise
        except (OSError, ValueError, Timeout) as e:
            logger.error("Failed to store credential %s in %s: %s", name, self.path, e)
            return False

        logger.debug("Stored credential %s in %s", name, self.path)
        audit_log("credential_write", name=name, store="file")
        return True
