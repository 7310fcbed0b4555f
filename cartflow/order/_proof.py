"""
Payment proof — a transfer receipt photo, JPG or PNG, at most 1 MB.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from kungfu import Error, Ok, Result

from cartflow.errors import CheckoutError, ErrorKind

MAX_PROOF_BYTES = 1024 * 1024

PROOF_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


@dataclass(frozen=True, slots=True)
class PaymentProof:
    filename: str
    content_type: str
    content: bytes = b""

    @classmethod
    def from_path(cls, path: Path) -> PaymentProof:
        content_type = PROOF_CONTENT_TYPES.get(path.suffix.lower(), "application/octet-stream")
        return cls(filename=path.name, content_type=content_type, content=path.read_bytes())

    @property
    def size(self) -> int:
        return len(self.content)

    def validate(self, max_bytes: int = MAX_PROOF_BYTES) -> Result[PaymentProof, CheckoutError]:
        if self.content_type not in PROOF_CONTENT_TYPES.values():
            return Error(CheckoutError(ErrorKind.INVALID_PROOF, "Payment proof must be a JPG or PNG image"))
        if not self.content:
            return Error(CheckoutError(ErrorKind.INVALID_PROOF, "Payment proof is empty"))
        if self.size > max_bytes:
            return Error(CheckoutError(
                ErrorKind.INVALID_PROOF,
                f"Payment proof is {self.size} bytes, the limit is {max_bytes}",
            ))
        return Ok(self)


__all__ = ("MAX_PROOF_BYTES", "PROOF_CONTENT_TYPES", "PaymentProof")
