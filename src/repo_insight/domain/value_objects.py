"""Value objects: self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_IDENTITY = "account1"


@dataclass(frozen=True, slots=True)
class CredentialContext:
    """One set of GitHub credentials.

    ``identity`` is the label attached to every repository fetched with these
    credentials; ``principal`` is the GitHub username.  The token never
    appears in ``repr``.
    """

    principal: str
    token: str = field(repr=False)
    identity: str = DEFAULT_IDENTITY

    def __post_init__(self) -> None:
        if not self.principal.strip():
            raise ValueError("principal must not be empty.")
        if not self.token.strip():
            raise ValueError("token must not be empty.")

    @property
    def cache_key(self) -> str:
        return f"repositories:{self.identity}:{self.principal.lower()}"
