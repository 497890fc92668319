from typing import Self

from anyio import to_thread
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.admission_metrics import metrics
from src.service.admission.app.interface.i_pin_hasher import IPinHasher
from src.service.admission.app.interface.i_staff_pin_query_repo import IStaffPinQueryRepo


PIN_LENGTH = 4


def is_well_formed_pin(plain_pin: str) -> bool:
    return len(plain_pin) == PIN_LENGTH and plain_pin.isascii() and plain_pin.isdigit()


class CheckStaffPinUseCase:
    def __init__(
        self, *, staff_pin_query_repo: IStaffPinQueryRepo, pin_hasher: IPinHasher
    ) -> None:
        self.staff_pin_query_repo = staff_pin_query_repo
        self.pin_hasher = pin_hasher

    @classmethod
    @inject
    def depends(
        cls,
        staff_pin_query_repo: IStaffPinQueryRepo = Depends(
            Provide[Container.staff_pin_query_repo]
        ),
        pin_hasher: IPinHasher = Depends(Provide[Container.pin_hasher]),
    ) -> Self:
        return cls(staff_pin_query_repo=staff_pin_query_repo, pin_hasher=pin_hasher)

    @Logger.io
    async def execute(self, *, pin: SecretStr) -> bool:
        # Malformed input is simply not a valid PIN; no lookup needed
        if not is_well_formed_pin(pin.get_secret_value()):
            metrics.record_staff_pin_check(valid=False)
            return False

        hashed_pins = await self.staff_pin_query_repo.list_active_pin_hashes()
        valid = False
        for hashed_pin in hashed_pins:
            # bcrypt is CPU bound; keep the event loop free while it runs
            if await to_thread.run_sync(self._verify, pin, hashed_pin):
                valid = True
                break

        metrics.record_staff_pin_check(valid=valid)
        if not valid:
            Logger.base.warning('🔒 [PIN] Staff PIN rejected')
        return valid

    def _verify(self, pin: SecretStr, hashed_pin: str) -> bool:
        return self.pin_hasher.verify_pin(plain_pin=pin, hashed_pin=hashed_pin)
