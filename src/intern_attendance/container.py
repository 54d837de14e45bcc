from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.aggregator import SessionAggregator
from .attendance.factory import SessionStrategyFactory
from .attendance.model import WorkingHours
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.timecodec import parse_canonical_time
from .common.datetime_utils import local_clock
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .verification.service import VerificationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService
    verification_service: VerificationService


def working_hours_from_settings(values: Optional[dict]) -> WorkingHours:
    if not values:
        return WorkingHours()
    return WorkingHours(
        start=parse_canonical_time(values["start"]),
        break_start=parse_canonical_time(values["break_start"]),
        break_end=parse_canonical_time(values["break_end"]),
        end=parse_canonical_time(values["end"]),
    )


def build_services(
    attendance_repo: AttendanceRepository,
    *,
    conn: Optional[DatabaseConnection] = None,
    timezone: str = DEFAULT_TIMEZONE,
    working_hours: Optional[WorkingHours] = None,
    clock=None,
) -> Container:
    clock = clock or local_clock(timezone)

    attendance_service = AttendanceService(
        attendance_repo,
        aggregator=SessionAggregator(SessionStrategyFactory()),
        working_hours=working_hours,
        clock=clock,
    )
    verification_service = VerificationService(attendance_repo, clock=clock)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        verification_service=verification_service,
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    working_hours: Optional[dict] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        MySQLAttendanceRepository(conn),
        conn=conn,
        timezone=timezone,
        working_hours=working_hours_from_settings(working_hours),
    )
