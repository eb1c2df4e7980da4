from pydantic import BaseModel, Field
from typing import List, Optional


class LanguageRuntime(BaseModel):
    language: str
    version: str


class SourceFile(BaseModel):
    content: str
    name: Optional[str] = None


class PistonExecuteRequest(BaseModel):
    language: str
    version: str
    files: List[SourceFile]
    stdin: str = ""
    run_timeout: Optional[int] = None
    compile_timeout: Optional[int] = None


class PistonStage(BaseModel):
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    output: Optional[str] = None
    code: Optional[int] = None
    signal: Optional[str] = None


class PistonExecuteResponse(BaseModel):
    language: Optional[str] = None
    version: Optional[str] = None
    run: Optional[PistonStage] = None
    compile: Optional[PistonStage] = None
    message: Optional[str] = None


class ExecutionResult(BaseModel):
    output: str = ""
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    exit_code: Optional[int] = None
    language: str
    version: str
    duration_ms: Optional[float] = Field(default=None, ge=0)
