import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, field_validator
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from modulehub.auth.dependencies import get_current_identity, get_settings, require_admin, security
from modulehub.core.errors import InternalError, NotFound
from modulehub.database import get_db
from modulehub.models.module_info import ModuleInfo

logger = logging.getLogger(__name__)


def require_read_access(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> None:
    """Let anonymous reads through only when public reads are enabled."""
    if get_settings(request).moduleinfo_public_reads:
        return
    get_current_identity(request, credentials)


public_router = APIRouter(
    prefix='/moduleinfo',
    tags=['moduleinfo'],
    dependencies=[Depends(require_read_access)],
)
api_router = APIRouter(
    prefix='/api/moduleinfo',
    tags=['moduleinfo'],
    dependencies=[Depends(get_current_identity)],
)


class ModuleInfoRequest(BaseModel):
    module_name: str
    module_duration: int
    exam_type: str
    version: str

    @field_validator('module_name', 'exam_type', 'version')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Field is required.')
        return normalized

    @field_validator('module_duration')
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError('Module duration must be positive.')
        return value


class ModuleInfoResponse(BaseModel):
    id: int
    module_name: str
    module_duration: int
    exam_type: str
    version: str

    class Config:
        from_attributes = True


def get_module_or_404(module_id: int, db: Session) -> ModuleInfo:
    module = db.get(ModuleInfo, module_id)
    if module is None:
        raise NotFound('Module info not found')
    return module


def commit_or_raise(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Module info write failed')
        raise InternalError() from exc


@public_router.get('', response_model=list[ModuleInfoResponse])
@api_router.get('', response_model=list[ModuleInfoResponse])
def list_module_info(db: Session = Depends(get_db)):
    return list(db.scalars(select(ModuleInfo).order_by(ModuleInfo.id)))


@public_router.get('/{module_id}', response_model=ModuleInfoResponse)
@api_router.get('/{module_id}', response_model=ModuleInfoResponse)
def get_module_info(module_id: int, db: Session = Depends(get_db)):
    return get_module_or_404(module_id, db)


@api_router.post(
    '',
    status_code=status.HTTP_201_CREATED,
    response_model=ModuleInfoResponse,
    dependencies=[Depends(require_admin)],
)
def create_module_info(payload: ModuleInfoRequest, db: Session = Depends(get_db)):
    module = ModuleInfo(**payload.model_dump())
    db.add(module)
    commit_or_raise(db)
    db.refresh(module)
    logger.info('Created module info %s', module.id)
    return module


@api_router.put(
    '/{module_id}',
    response_model=ModuleInfoResponse,
    dependencies=[Depends(require_admin)],
)
def update_module_info(module_id: int, payload: ModuleInfoRequest, db: Session = Depends(get_db)):
    module = get_module_or_404(module_id, db)
    for field_name, value in payload.model_dump().items():
        setattr(module, field_name, value)
    commit_or_raise(db)
    db.refresh(module)
    return module


@api_router.delete(
    '/{module_id}',
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_module_info(module_id: int, db: Session = Depends(get_db)):
    module = get_module_or_404(module_id, db)
    db.delete(module)
    commit_or_raise(db)
    logger.info('Deleted module info %s', module_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
