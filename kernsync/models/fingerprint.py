"""Content fingerprint model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

ABSENT_DIGEST = "absent"


class Fingerprint(BaseModel):
    """A fixed-size digest of file content.

    The sentinel produced by ``Fingerprint.absent()`` stands for "no local
    file".  Its hexdigest is not valid hex, so it can never equal the
    fingerprint of real content, not even a real zero-byte file.
    """

    model_config = ConfigDict(frozen=True)

    algorithm: str
    hexdigest: str

    @classmethod
    def absent(cls, algorithm: str) -> Fingerprint:
        return cls(algorithm=algorithm, hexdigest=ABSENT_DIGEST)

    @property
    def is_absent(self) -> bool:
        return self.hexdigest == ABSENT_DIGEST

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.hexdigest}"
