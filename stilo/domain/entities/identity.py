from dataclasses import dataclass


@dataclass(frozen=True)
class CustomerIdentity:
    id: str
    email: str | None = None
