from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """Opaque slow-hash primitive used for account passwords"""

    @abstractmethod
    def hash(self, secret: str) -> str:
        pass

    @abstractmethod
    def verify(self, secret: str, digest: str) -> bool:
        pass
