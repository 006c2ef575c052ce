from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """
    Minimal user identity for hosts without their own user type.

    The engine only ever reads ``id``; any object exposing it works.
    """

    id: str
    name: str = ""

    def __str__(self) -> str:
        return self.name or self.id
