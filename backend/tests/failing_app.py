"""Failing app — minimal FastAPI app whose routes fail in every way the
interceptor must catch."""

from fastapi import FastAPI

from board_api.api.error_handlers import register_error_handlers
from board_api.core.errors import BoardApiError
from board_api.services.failure_reporting import FailureInterceptor


def build_failing_app(interceptor: FailureInterceptor) -> FastAPI:
    failing = FastAPI()
    register_error_handlers(failing)
    failing.state.failure_interceptor = interceptor

    @failing.get("/boards/{boardId}/async-fail")
    async def async_fail(boardId: str):
        raise RuntimeError("async handler failed")

    @failing.get("/sync-fail")
    def sync_fail():
        raise ValueError("sync handler failed")

    @failing.get("/declared/{status_code}")
    async def declared(status_code: int):
        raise BoardApiError("declared failure", http_status=status_code)

    @failing.get("/no-message")
    async def no_message():
        raise RuntimeError()

    return failing
