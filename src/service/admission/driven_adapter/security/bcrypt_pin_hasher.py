import bcrypt
from pydantic import SecretStr

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_pin_hasher import IPinHasher


class BcryptPinHasher(IPinHasher):
    """Concrete bcrypt implementation of IPinHasher"""

    @Logger.io
    def hash_pin(self, *, plain_pin: SecretStr) -> str:
        pin_bytes = plain_pin.get_secret_value().encode('utf-8')
        return bcrypt.hashpw(pin_bytes, bcrypt.gensalt()).decode('utf-8')

    @Logger.io
    def verify_pin(self, *, plain_pin: SecretStr, hashed_pin: str) -> bool:
        pin_bytes = plain_pin.get_secret_value().encode('utf-8')
        try:
            return bcrypt.checkpw(pin_bytes, hashed_pin.encode('utf-8'))
        except ValueError:
            # Malformed hash row (e.g. hand-edited); never matches
            Logger.base.warning('⚠️ [PIN] Skipping malformed staff PIN hash')
            return False
