from pydantic import BaseModel
from app.models.enums import CodeNamespace


class GeneratedCodeRead(BaseModel):
    namespace: CodeNamespace
    code: str


class CodeCheckRead(BaseModel):
    namespace: CodeNamespace
    code: str
    is_unique: bool
