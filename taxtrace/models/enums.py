"""Enumerations for taxtrace."""

from enum import StrEnum


class FilingStatus(StrEnum):
    SINGLE = "single"
    MFJ = "mfj"
    MFS = "mfs"
    HOH = "hoh"
    QSS = "qss"


class Form8949Category(StrEnum):
    """Form 8949 check box.

    A/B are short-term (basis reported / not reported), D/E long-term.
    """

    A = "A"
    B = "B"
    D = "D"
    E = "E"

    @property
    def long_term(self) -> bool:
        return self in (Form8949Category.D, Form8949Category.E)


class AdjustmentCode(StrEnum):
    BASIS = "B"
    WASH_SALE = "W"


class DeductionMethod(StrEnum):
    STANDARD = "standard"
    ITEMIZED = "itemized"


class ResidencyType(StrEnum):
    FULL_YEAR = "full-year"
    PART_YEAR = "part-year"
    NONRESIDENT = "nonresident"


class ValueUnit(StrEnum):
    CENTS = "cents"
    RATIO = "ratio"  # parts per million
    COUNT = "count"
    FLAG = "flag"  # 0 or 1
