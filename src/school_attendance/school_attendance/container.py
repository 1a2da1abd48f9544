from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import TimelinessStrategyFactory
from .attendance.service import AttendanceService
from .attendance.sqlite_attendance_repository import SQLiteAttendanceRepository
from .audit.service import PasswordLogService
from .audit.sqlite_password_log_repository import SQLitePasswordLogRepository
from .backups.service import BackupService
from .backups.sqlite_backup_repository import SQLiteBackupRepository
from .core.constants import DEFAULT_ON_TIME_DEADLINE
from .database.connection import DBConfig, DatabaseConnection
from .database.schema import SchemaManager
from .reports.service import AttendanceReportService
from .schools.service import SchoolService
from .schools.sqlite_school_repository import SQLiteSchoolRepository
from .settings.service import SettingsService
from .settings.sqlite_settings_repository import SQLiteSettingsRepository
from .students.service import StudentService
from .students.sqlite_student_repository import SQLiteStudentRepository
from .teachers.service import TeacherService
from .teachers.sqlite_teacher_repository import SQLiteTeacherRepository
from .users.service import AuthService, OperatorService
from .users.sqlite_operator_repository import SQLiteOperatorRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    schema: SchemaManager

    students_repo: SQLiteStudentRepository
    teachers_repo: SQLiteTeacherRepository
    operators_repo: SQLiteOperatorRepository
    schools_repo: SQLiteSchoolRepository
    settings_repo: SQLiteSettingsRepository
    attendance_repo: SQLiteAttendanceRepository
    backups_repo: SQLiteBackupRepository
    password_log_repo: SQLitePasswordLogRepository

    password_log_service: PasswordLogService
    settings_service: SettingsService
    auth_service: AuthService
    operator_service: OperatorService
    school_service: SchoolService
    student_service: StudentService
    teacher_service: TeacherService
    attendance_service: AttendanceService
    backup_service: BackupService
    report_service: AttendanceReportService


def build_container(*, db_config: dict, default_deadline: str = DEFAULT_ON_TIME_DEADLINE) -> Container:
    """Wire repositories and services around one database handle.

    The schema is not opened here; callers run ``container.schema.open()``.
    """
    conn = DatabaseConnection(DBConfig(path=str(db_config["path"])))
    return build_container_for(conn, default_deadline=default_deadline)


def build_container_for(conn: DatabaseConnection, *, default_deadline: str = DEFAULT_ON_TIME_DEADLINE) -> Container:
    students_repo = SQLiteStudentRepository(conn)
    teachers_repo = SQLiteTeacherRepository(conn)
    operators_repo = SQLiteOperatorRepository(conn)
    schools_repo = SQLiteSchoolRepository(conn)
    settings_repo = SQLiteSettingsRepository(conn)
    attendance_repo = SQLiteAttendanceRepository(conn)
    backups_repo = SQLiteBackupRepository(conn)
    password_log_repo = SQLitePasswordLogRepository(conn)

    password_log_service = PasswordLogService(password_log_repo)
    settings_service = SettingsService(settings_repo, password_log_service, default_deadline=default_deadline)
    school_service = SchoolService(schools_repo, settings_service)
    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        settings_service,
        strategy_factory=TimelinessStrategyFactory(),
    )

    return Container(
        conn=conn,
        schema=SchemaManager(conn),
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        operators_repo=operators_repo,
        schools_repo=schools_repo,
        settings_repo=settings_repo,
        attendance_repo=attendance_repo,
        backups_repo=backups_repo,
        password_log_repo=password_log_repo,
        password_log_service=password_log_service,
        settings_service=settings_service,
        auth_service=AuthService(operators_repo, settings_service),
        operator_service=OperatorService(operators_repo, password_log_service),
        school_service=school_service,
        student_service=StudentService(students_repo),
        teacher_service=TeacherService(teachers_repo),
        attendance_service=attendance_service,
        backup_service=BackupService(backups_repo, school_service),
        report_service=AttendanceReportService(attendance_service, students_repo),
    )
