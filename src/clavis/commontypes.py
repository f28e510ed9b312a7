# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import math
import typing

import msgspec

# Codes are compared for equality only. INVALID_CODE stands in for sequence tokens
# that could not be parsed; NaN is unequal to everything, so it can never be matched.
Code = typing.Union[int, float]
INVALID_CODE: float = math.nan


class Point(msgspec.Struct, frozen=True):
    # touch coordinates can be fractional
    x: float
    y: float

    def __sub__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return Point(x=self.x - other.x, y=self.y - other.y)

    @classmethod
    def zeroes(cls):
        return cls(x=0, y=0)


class ClavisError(Exception):
    pass


class ConfigurationError(ClavisError):
    pass


class InputSourceUnavailable(ClavisError):
    pass


class MalformedEventError(ClavisError):
    pass
