"""요청 단위 Trace ID 보관소 (ContextVar)"""
import contextvars
from typing import Optional

trace_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("trace_id", default=None)


def get_trace_id() -> Optional[str]:
    return trace_id_context.get()


def set_trace_id(trace_id: Optional[str]) -> contextvars.Token:
    """Trace ID를 설정하고, 요청이 끝난 뒤 되돌릴 수 있도록 Token을 반환합니다."""
    return trace_id_context.set(trace_id)


def reset_trace_id(token: contextvars.Token) -> None:
    trace_id_context.reset(token)
