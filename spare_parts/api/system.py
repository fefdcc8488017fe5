"""
Application-level handlers: version and log file locations.
"""
from sqlalchemy.orm import Session

from spare_parts.api.router import ChannelRouter
from spare_parts.core.config import settings
from spare_parts.core.security import SessionContext
from spare_parts.logging_config import get_log_path, get_logs_directory

router = ChannelRouter(prefix="app", tags=["App"])


@router.handle("get-version")
def get_version(db: Session, ctx: SessionContext) -> str:
    return settings.app_version


@router.handle("get-log-path")
def get_log_file(db: Session, ctx: SessionContext) -> str:
    return str(get_log_path())


@router.handle("get-logs-directory")
def get_log_folder(db: Session, ctx: SessionContext) -> str:
    return str(get_logs_directory())
