from abc import ABC, abstractmethod

from cable_iam.libs.result import Result


class IMailSender(ABC):
    """Outbound mail collaborator; failures are reported, never raised"""

    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> Result[None]:
        pass
