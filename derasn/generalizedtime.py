"""ASN.1 GeneralizedTime."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import ClassVar, Optional

from derasn.core import (
    Any,
    Asn1Type,
    DerConstraint,
    DerConstraintError,
    StringInvalidCharsetError,
    Tag,
)


class TimeZoneKind(enum.IntEnum):
    """How the time zone of a time value is given."""

    UNDEFINED = 0
    Z = 1
    OFFSET = 2


@dataclass(frozen=True, order=True)
class Asn1TimeZone:
    """Time zone of a time value: none, UTC ("Z") or an hour/minute offset."""

    kind: TimeZoneKind
    hours: int = 0
    minutes: int = 0

    UNDEFINED: ClassVar["Asn1TimeZone"]
    UTC: ClassVar["Asn1TimeZone"]

    @classmethod
    def offset(cls, hours: int, minutes: int) -> "Asn1TimeZone":
        return cls(TimeZoneKind.OFFSET, hours, minutes)


Asn1TimeZone.UNDEFINED = Asn1TimeZone(TimeZoneKind.UNDEFINED)
Asn1TimeZone.UTC = Asn1TimeZone(TimeZoneKind.Z)


@dataclass(frozen=True, order=True)
class Asn1DateTime:
    """Calendar date and time of day as written in an ASN.1 time string."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    millisecond: Optional[int] = None
    tz: Asn1TimeZone = Asn1TimeZone.UNDEFINED


def _decode_decimal(tag: Tag, hi: int, lo: int) -> int:
    if 0x30 <= hi <= 0x39 and 0x30 <= lo <= 0x39:
        return (hi - 0x30) * 10 + (lo - 0x30)
    raise tag.invalid_value("expected two decimal digits")


@dataclass(frozen=True, order=True)
class GeneralizedTime(Asn1Type):
    """A GeneralizedTime value."""

    value: Asn1DateTime

    TAG: ClassVar[Tag] = Tag.GENERALIZED_TIME

    @classmethod
    def from_bytes(cls, data: bytes) -> "GeneralizedTime":
        """Parse the content string (YYYYMMDDhhmm[ss][.fff][Z|+hhmm|-hhmm])."""
        tag = cls.TAG
        data = bytes(data)
        if len(data) < 12:
            raise tag.invalid_value("malformed time string (not yymmddhhmm)")

        def pair(pos: int) -> int:
            return _decode_decimal(tag, data[pos], data[pos + 1])

        year = pair(0) * 100 + pair(2)
        month, day, hour, minute = pair(4), pair(6), pair(8), pair(10)
        rem = data[12:]
        if not rem:
            raise tag.invalid_value("malformed time string")
        second = 0
        if len(rem) >= 2:
            second = _decode_decimal(tag, rem[0], rem[1])
            rem = rem[2:]
        if month > 12 or day > 31 or hour > 23 or minute > 59 or second > 59:
            raise tag.invalid_value("time components with invalid values")

        def build(millisecond: Optional[int], tz: Asn1TimeZone) -> "GeneralizedTime":
            return cls(Asn1DateTime(year, month, day, hour, minute, second, millisecond, tz))

        if not rem:
            return build(None, Asn1TimeZone.UNDEFINED)

        millisecond = None
        if rem[0] in b".,":
            rem = rem[1:]
            fsecond = 0
            digits = 0
            for idx in range(5):
                if not rem:
                    if idx == 0:
                        raise tag.invalid_value("malformed time string (dot or comma but no digits)")
                    digits = idx
                    break
                if idx == 4:
                    raise tag.invalid_value("malformed time string (invalid milliseconds)")
                octet = rem[0]
                if 0x30 <= octet <= 0x39:
                    fsecond = fsecond * 10 + (octet - 0x30)
                elif octet in b"Z+-":
                    digits = idx
                    break
                else:
                    raise tag.invalid_value("malformed time string (invalid milliseconds/timezone)")
                rem = rem[1:]
            if digits == 1:
                fsecond *= 100
            elif digits == 2:
                fsecond *= 10
            millisecond = fsecond

        if not rem:
            return build(millisecond, Asn1TimeZone.UNDEFINED)
        if rem == b"Z":
            tz = Asn1TimeZone.UTC
        elif len(rem) == 5 and rem[0] in b"+-":
            hh = _decode_decimal(tag, rem[1], rem[2])
            mm = _decode_decimal(tag, rem[3], rem[4])
            tz = Asn1TimeZone.offset(hh if rem[0] == 0x2B else -hh, mm)
        else:
            raise tag.invalid_value("malformed time string: no time zone")
        return build(millisecond, tz)

    @classmethod
    def from_any(cls, any: Any) -> "GeneralizedTime":
        any.tag.assert_eq(cls.TAG)
        if not all(0x20 <= octet <= 0x7F for octet in any.data):
            raise StringInvalidCharsetError()
        return cls.from_bytes(any.data)

    @classmethod
    def check_constraints(cls, any: Any) -> None:
        if not any.data.endswith(b"Z"):
            raise DerConstraintError(DerConstraint.MISSING_TIME_ZONE)
        if b"," in any.data:
            raise DerConstraintError(DerConstraint.MISSING_SECONDS)

    def der_content(self) -> bytes:
        dt = self.value
        fraction = "" if dt.millisecond is None else f".{dt.millisecond}"
        text = (
            f"{dt.year:04}{dt.month:02}{dt.day:02}"
            f"{dt.hour:02}{dt.minute:02}{dt.second:02}{fraction}Z"
        )
        return text.encode("ascii")

    def to_datetime(self) -> datetime:
        """An aware datetime; a missing time zone is taken as UTC."""
        dt = self.value
        tz = dt.tz
        try:
            if tz.kind is TimeZoneKind.OFFSET:
                sign = -1 if tz.hours < 0 else 1
                tzinfo = timezone(timedelta(hours=tz.hours, minutes=sign * tz.minutes))
            else:
                tzinfo = timezone.utc
            return datetime(
                dt.year,
                dt.month,
                dt.day,
                dt.hour,
                dt.minute,
                dt.second,
                (dt.millisecond or 0) * 1000,
                tzinfo=tzinfo,
            )
        except (ValueError, OverflowError) as exc:
            raise self.TAG.invalid_value(f"invalid date or time: {exc}") from None

    def __str__(self) -> str:
        dt = self.value
        fraction = "" if dt.millisecond is None else f".{dt.millisecond}"
        text = (
            f"{dt.year:04}-{dt.month:02}-{dt.day:02} "
            f"{dt.hour:02}:{dt.minute:02}:{dt.second:02}{fraction}"
        )
        tz = dt.tz
        if tz.kind is TimeZoneKind.Z:
            return text + "Z"
        if tz.kind is TimeZoneKind.OFFSET:
            sign, hours = ("+", tz.hours) if tz.hours > 0 else ("-", -tz.hours)
            return f"{text}{sign}{hours:02}{tz.minutes:02}"
        return text