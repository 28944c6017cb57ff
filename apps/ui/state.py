"""Per-browser-session portal context for the Streamlit pages."""

from __future__ import annotations

import streamlit as st

from core.logging import configure_logging
from domain.capabilities import Capability
from domain.models import ApplicationStatus, ConnectionState
from domain.value_objects import Fee
from services.notices import NoticeLevel
from services.persistence.supabase import SupabaseGateway
from services.session import AppContext

_ICONS = {NoticeLevel.SUCCESS: "✅", NoticeLevel.INFO: "ℹ️", NoticeLevel.ERROR: "⚠️"}

STATUS_COLORS = {
    ApplicationStatus.PENDING: "orange",
    ApplicationStatus.IN_REVIEW: "blue",
    ApplicationStatus.APPROVED: "green",
    ApplicationStatus.REJECTED: "red",
    ApplicationStatus.COMPLETED: "violet",
}


def get_context() -> AppContext:
    """The session's AppContext, created and initialized on first use."""
    if "ctx" not in st.session_state:
        configure_logging()
        st.session_state.ctx = AppContext(SupabaseGateway.from_settings()).initialize()
    return st.session_state.ctx


def flush_notices(ctx: AppContext) -> None:
    for notice in ctx.notices.drain():
        st.toast(notice.message, icon=_ICONS[notice.level])


def connection_banner(ctx: AppContext) -> None:
    if ctx.connection is ConnectionState.ERROR:
        st.error("Database connection error. Showing sample data; changes cannot be saved.")
        if st.button("Retry connection"):
            ctx.initialize(subscribe=False)
            st.rerun()


def page_header(title: str) -> AppContext:
    st.set_page_config(page_title=f"{title} · E-Gram Panchayat", layout="wide")
    ctx = get_context()
    st.title(title)
    connection_banner(ctx)
    with st.sidebar:
        if ctx.user is not None:
            st.caption(f"Signed in as **{ctx.user.name}** ({ctx.user.role.value})")
        else:
            st.caption("Not signed in")
    return ctx


def require_login(ctx: AppContext) -> None:
    if ctx.user is None:
        st.warning("Please sign in to continue.")
        st.page_link("Home.py", label="Go to sign in")
        flush_notices(ctx)
        st.stop()


def require_capability(ctx: AppContext, capability: Capability, message: str) -> None:
    require_login(ctx)
    if not ctx.can(capability):
        st.error(message)
        flush_notices(ctx)
        st.stop()


def status_badge(status: ApplicationStatus) -> str:
    return f":{STATUS_COLORS[ApplicationStatus(status)]}[{ApplicationStatus(status).label.title()}]"


def fee_text(amount) -> str:
    return Fee(float(amount or 0)).display()
