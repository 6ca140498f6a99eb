"""Character sets a payload may declare in its third line."""

from enum import IntEnum


class Charset(IntEnum):
    """Numeric charset codes of the EPC guideline.

    The code is written into the payload as digits; `codec` names the
    Python codec that encodes text in that charset.
    """

    UTF_8 = 1
    ISO8859_1 = 2
    ISO8859_2 = 3
    ISO8859_4 = 4
    ISO8859_5 = 5
    ISO8859_7 = 6
    ISO8859_10 = 7
    ISO8859_15 = 8

    @property
    def codec(self) -> str:
        if self is Charset.UTF_8:
            return "utf-8"
        return "iso8859-" + self.name.split("_", 1)[1]
