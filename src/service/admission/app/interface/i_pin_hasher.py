from abc import ABC, abstractmethod

from pydantic import SecretStr


class IPinHasher(ABC):
    """Abstract interface for staff PIN hashing"""

    @abstractmethod
    def hash_pin(self, *, plain_pin: SecretStr) -> str:
        pass

    @abstractmethod
    def verify_pin(self, *, plain_pin: SecretStr, hashed_pin: str) -> bool:
        pass
