import streamlit as st

from apps.ui.state import flush_notices, page_header, require_capability, status_badge
from domain.capabilities import Capability
from domain.models import ApplicationStatus
from services.views.applications import ALL
from services.views.review import ReviewBoard

ctx = page_header("Review Applications")
require_capability(ctx, Capability.PROCESS_APPLICATIONS, "Only staff and administrators can review applications.")

board = ReviewBoard(ctx)
board.load()

cols = st.columns(len(ApplicationStatus))
for col, status in zip(cols, ApplicationStatus):
    col.metric(status.label.title(), board.counts[status])

left, right = st.columns([2, 1])
board.search_term = left.text_input("Search by service, applicant or id")
board.status_filter = right.selectbox(
    "Status",
    [ALL] + [s.value for s in ApplicationStatus],
    format_func=lambda v: "All" if v == ALL else ApplicationStatus(v).label.title(),
)

for app in board.filtered:
    service = app.service.name if app.service else "Unknown service"
    applicant = app.applicant.name if app.applicant else "Unknown applicant"
    with st.expander(f"{service} · {applicant} · {app.created_at:%d %b %Y}"):
        st.markdown(f"Status: {status_badge(app.status)}")
        st.write("Documents: " + (", ".join(app.documents) or "none"))
        notes = st.text_area("Notes", value=app.notes or "", key=f"notes_{app.id}")
        buttons = st.columns(4)
        for button, action in zip(buttons, board.actions(app)):
            if button.button(action["label"], key=f"{action['status']}_{app.id}", disabled=not action["enabled"]):
                board.transition(app.id, action["status"], notes)
                st.rerun()

flush_notices(ctx)
