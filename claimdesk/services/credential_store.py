"""
Storage for the Drive OAuth credential bundle.

A bundle is a plain dict (access_token, refresh_token, expiry, token_type,
scope). There is a single slot per process; no bundle means "not authorized".
Concurrent uploads racing on the token file are not guarded against.
"""
import json
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Dict, Optional

from claimdesk import logger


class CredentialStore(ABC):
    @abstractmethod
    def load(self) -> Optional[Dict]:
        """The stored bundle, or None when nothing is authorized"""

    @abstractmethod
    def save(self, bundle: Dict) -> None:
        """Replace the stored bundle"""

    def merge(self, fields: Dict) -> Dict:
        """
        Overlay newly issued token fields on the stored bundle and persist it.
        Empty values never replace known ones, so a refresh that omits the
        refresh token keeps the old one.
        """
        current = self.load() or {}
        merged = {**current, **{k: v for k, v in fields.items() if v not in (None, '')}}
        self.save(merged)
        return merged


class FileCredentialStore(CredentialStore):
    """Bundle kept as JSON in a file, replaced atomically on every save"""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[Dict]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as handle:
                bundle = json.load(handle)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading tokens from {self.path}: {str(e)}")
            return None
        return bundle or None

    def save(self, bundle: Dict) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix='.tokens-', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                json.dump(bundle, handle, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class InMemoryCredentialStore(CredentialStore):
    def __init__(self, bundle: Optional[Dict] = None):
        self._bundle = dict(bundle) if bundle else None

    def load(self) -> Optional[Dict]:
        return dict(self._bundle) if self._bundle else None

    def save(self, bundle: Dict) -> None:
        self._bundle = dict(bundle)
