import asyncio
import logging
import time
from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError as SchemaError

from app.common.errors import ExecutionFailure
from app.core.config import get_settings
from .schemas import (
    ExecutionResult,
    LanguageRuntime,
    PistonExecuteRequest,
    PistonExecuteResponse,
    SourceFile,
)

# Mirrors the runtime table the frontend editor offers
PISTON_LANGUAGES: Dict[str, LanguageRuntime] = {
    "python": LanguageRuntime(language="python", version="3.10.0"),
    "java": LanguageRuntime(language="java", version="15.0.2"),
    "cpp": LanguageRuntime(language="c++", version="10.2.0"),
    "c": LanguageRuntime(language="c", version="10.2.0"),
    "typescript": LanguageRuntime(language="typescript", version="5.0.3"),
    "php": LanguageRuntime(language="php", version="8.2.3"),
    "ruby": LanguageRuntime(language="ruby", version="3.0.1"),
    "go": LanguageRuntime(language="go", version="1.16.2"),
    "rust": LanguageRuntime(language="rust", version="1.68.2"),
    "kotlin": LanguageRuntime(language="kotlin", version="1.8.20"),
    "swift": LanguageRuntime(language="swift", version="5.3.3"),
}

UNAVAILABLE_MESSAGE = "Execution service unavailable"
NO_OUTPUT_MESSAGE = "No output received"


class ExecutionService:
    def __init__(self):
        self.settings = get_settings()
        base = (self.settings.piston_base_url or "").strip()
        if base and not base.startswith("http://") and not base.startswith("https://"):
            # assume https if scheme omitted
            base = "https://" + base
        self.base_url = base.rstrip("/")
        self.headers = {"Content-Type": "application/json"}
        self._logger = logging.getLogger(__name__)

    def supported_languages(self) -> List[str]:
        return sorted(PISTON_LANGUAGES)

    def resolve_runtime(self, language: Optional[str]) -> LanguageRuntime:
        runtime = PISTON_LANGUAGES.get((language or "").strip().lower())
        if runtime is None:
            raise ExecutionFailure("unsupported_language", f"Unsupported language: {language}")
        return runtime

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Perform an HTTP request against the configured execution service.

        Connection failures are retried with a short linear backoff, then raised
        as ``ExecutionFailure`` so callers can fold them into a test case.
        """
        if not self.base_url:
            raise ExecutionFailure("execution_unconfigured", UNAVAILABLE_MESSAGE)
        if not path.startswith("/"):
            path = "/" + path
        url = self.base_url + path
        self._logger.debug("execution request: %s %s", method, url)
        timeout = httpx.Timeout(connect=3.0, read=self.settings.execution_timeout_s, write=5.0, pool=5.0)
        max_retries = self.settings.execution_max_retries
        for attempt in range(max_retries):
            try:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    return await client.request(method, url, headers=self.headers, **kwargs)
            except (httpx.ConnectTimeout, httpx.ConnectError) as e:
                if attempt < max_retries - 1:
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue
                self._logger.warning("execution service unreachable at %s: %s", self.base_url, e)
                raise ExecutionFailure("execution_unreachable", UNAVAILABLE_MESSAGE) from e
            except httpx.HTTPError as e:
                self._logger.warning("execution request failed: %s", e)
                raise ExecutionFailure("execution_error", f"Execution error: {e}") from e
        raise ExecutionFailure("execution_unreachable", UNAVAILABLE_MESSAGE)

    async def execute(self, source_code: str, language: Optional[str], stdin: Optional[str] = None) -> ExecutionResult:
        """Run one program and return its captured output.

        Raises ``ExecutionFailure`` for an unsupported language (without calling
        out), an unreachable or erroring service, a timeout, or a run that only
        produced stderr.
        """
        runtime = self.resolve_runtime(language)
        request = PistonExecuteRequest(
            language=runtime.language,
            version=runtime.version,
            files=[SourceFile(content=source_code)],
            stdin=stdin or "",
        )
        limit = self.settings.execution_timeout_s
        t0 = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._request("POST", "/execute", json=request.model_dump(exclude_none=True)),
                timeout=limit,
            )
        except asyncio.TimeoutError as e:
            self._logger.info("execution timed out language=%s limit=%ss", runtime.language, limit)
            raise ExecutionFailure("execution_timeout", f"Execution timed out after {limit:g}s") from e
        duration_ms = round((time.perf_counter() - t0) * 1000, 2)

        if not 200 <= response.status_code < 300:
            self._logger.warning("execution non-2xx status=%s body=%s", response.status_code, response.text[:200])
            raise ExecutionFailure("execution_unavailable", UNAVAILABLE_MESSAGE)
        try:
            payload = PistonExecuteResponse(**response.json())
        except (ValueError, TypeError, SchemaError) as e:
            raise ExecutionFailure("execution_bad_payload", NO_OUTPUT_MESSAGE) from e

        run = payload.run
        if run is None:
            raise ExecutionFailure("execution_no_run", payload.message or NO_OUTPUT_MESSAGE)
        output = run.output or run.stdout or ""
        error = run.stderr or ""
        if error and not output:
            raise ExecutionFailure("execution_runtime_error", error)
        return ExecutionResult(
            output=output or error or "",
            stdout=run.stdout,
            stderr=run.stderr,
            exit_code=run.code,
            language=runtime.language,
            version=runtime.version,
            duration_ms=duration_ms,
        )


execution_service = ExecutionService()
