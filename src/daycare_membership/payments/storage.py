"""Payment proof uploads.

Storage of the artifact is a collaborator: the workflow only keeps the
reference string that save() returns.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from werkzeug.utils import secure_filename

from ..common.datetime_utils import now_local
from ..core.constants import ALLOWED_PROOF_EXTENSIONS, MAX_PROOF_BYTES
from ..core.exceptions import MissingProof, ValidationError

logger = logging.getLogger(__name__)


class ProofStorage(Protocol):
    def save(self, filename: str, data: bytes) -> str:
        raise NotImplementedError

    def delete(self, proof_ref: str) -> None:
        """Drop an artifact whose payment request was never recorded."""

        raise NotImplementedError


def validate_proof_upload(filename: str, data: bytes, *, max_bytes: int = MAX_PROOF_BYTES) -> str:
    """Check an uploaded proof and return its lower-cased extension."""

    if not filename or not data:
        raise MissingProof("Payment proof is required")
    ext = os.path.splitext(filename)[1].lower()
    if ext not in ALLOWED_PROOF_EXTENSIONS:
        raise ValidationError("Invalid file type. Only JPG, PNG and PDF are allowed.")
    if len(data) > max_bytes:
        raise ValidationError(f"Payment proof exceeds the {max_bytes // (1024 * 1024)}MB limit")
    return ext


class LocalProofStorage(ProofStorage):
    """Writes proofs under a local directory, returns a URL-style path."""

    def __init__(self, upload_folder: str | Path, *, url_prefix: str = "/uploads/payments"):
        self._folder = Path(upload_folder)
        self._url_prefix = url_prefix.rstrip("/")

    def save(self, filename: str, data: bytes) -> str:
        self._folder.mkdir(parents=True, exist_ok=True)
        stamp = int(now_local().timestamp() * 1000)
        ext = os.path.splitext(filename)[1].lower()
        name = f"{stamp}-{secure_filename(filename) or 'proof' + ext}"
        (self._folder / name).write_bytes(data)
        logger.info("Stored payment proof %s (%d bytes)", name, len(data))
        return f"{self._url_prefix}/{name}"

    def delete(self, proof_ref: str) -> None:
        path = self._folder / proof_ref.rsplit("/", 1)[-1]
        path.unlink(missing_ok=True)
        logger.info("Removed payment proof %s", path.name)
