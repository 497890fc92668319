from enum import StrEnum


class CredentialKind(StrEnum):
    """Storage shape of a ticket credential"""

    COUNTER = 'counter'  # legacy: one identifier shared by every admission unit of a purchase
    UNIT = 'unit'  # one identifier per admission unit
