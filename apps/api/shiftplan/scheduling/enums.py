import enum

from shiftplan.core.errors import ValidationError


class WeekDay(str, enum.Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @classmethod
    def from_date(cls, d) -> "WeekDay":
        # date.weekday(): 0=Mon ... 6=Sun
        return _WEEKDAY_ORDER[d.weekday()]

    @property
    def ordinal(self) -> int:
        return _WEEKDAY_ORDER.index(self)


_WEEKDAY_ORDER = [
    WeekDay.MON,
    WeekDay.TUE,
    WeekDay.WED,
    WeekDay.THU,
    WeekDay.FRI,
    WeekDay.SAT,
    WeekDay.SUN,
]


class RecurrenceRule(str, enum.Enum):
    NONE = "NONE"
    DAILY = "DAILY"
    EVERY_TWO_DAYS = "EVERY_TWO_DAYS"
    WEEKLY = "WEEKLY"
    CUSTOM = "CUSTOM"


class ShiftStatus(str, enum.Enum):
    UNASSIGNED = "UNASSIGNED"
    PUBLISHED = "PUBLISHED"
    CONFIRMED = "CONFIRMED"
    NEED_REALLOCATION = "NEED_REALLOCATION"


class AssignmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


def _parse(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    raw = str(value or "").strip().upper()
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Unknown {label} '{value}'. Expected one of: {allowed}")


def parse_weekday(value) -> WeekDay:
    return _parse(WeekDay, value, "weekday")


def parse_recurrence_rule(value) -> RecurrenceRule:
    return _parse(RecurrenceRule, value, "recurrence rule")


def parse_shift_status(value) -> ShiftStatus:
    return _parse(ShiftStatus, value, "shift status")


def parse_assignment_status(value) -> AssignmentStatus:
    return _parse(AssignmentStatus, value, "assignment status")


def parse_role(value) -> Role:
    return _parse(Role, value, "role")
