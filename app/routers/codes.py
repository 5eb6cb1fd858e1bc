from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.deps import Store, require_admin
from app.models.enums import CodeNamespace
from app.schemas.code import GeneratedCodeRead, CodeCheckRead
from app.schemas.common import DataResponse
from app.services.access_codes import AccessCodeGenerator, CodeGenerationError, normalize_code

router = APIRouter(prefix="/codes", tags=["Access codes"], dependencies=[Depends(require_admin)])


@router.post("/{namespace}/generate", response_model=DataResponse[GeneratedCodeRead])
async def generate_code(
    namespace: CodeNamespace,
    store: Store,
    exclude_id: int | None = Query(None, description="Record being edited, its own code does not count as taken"),
):
    """
    Generate a new member code or group access code not used by any other record.

    The code is not reserved: it is only guaranteed when the record is saved.
    """
    generator = AccessCodeGenerator(store, namespace)

    try:
        code = await generator.generate_unique(exclude_id)
    except CodeGenerationError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return DataResponse(data=GeneratedCodeRead(namespace=namespace, code=code))


@router.get("/{namespace}/check", response_model=DataResponse[CodeCheckRead])
async def check_code(
    namespace: CodeNamespace,
    store: Store,
    code: Annotated[str, Query(min_length=1, max_length=20)],
    exclude_id: int | None = Query(None),
):
    generator = AccessCodeGenerator(store, namespace)
    is_unique = await generator.is_unique(code, exclude_id)

    return DataResponse(data=CodeCheckRead(namespace=namespace, code=normalize_code(code), is_unique=is_unique))
