import streamlit as st

from apps.ui.state import fee_text, flush_notices, page_header, require_login, status_badge
from domain.models import ApplicationStatus
from services.views.applications import ALL, ApplicationDetailView, MyApplicationsView

ctx = page_header("My Applications")
require_login(ctx)

view = MyApplicationsView(ctx)
view.load()

left, right = st.columns([2, 1])
view.search_term = left.text_input("Search by service")
view.status_filter = right.selectbox(
    "Status",
    [ALL] + [s.value for s in ApplicationStatus],
    format_func=lambda v: "All" if v == ALL else ApplicationStatus(v).label.title(),
)

apps = view.displayed
if not view.applications:
    st.caption("You have no applications yet; sample entries are shown.")
elif not apps:
    st.write("No applications match your filters.")

for app in apps:
    name = app.service.name if app.service else "Unknown service"
    with st.expander(f"{name} · {app.created_at:%d %b %Y}"):
        st.markdown(f"Status: {status_badge(app.status)}")
        if view.applications and st.button("Details", key=f"detail_{app.id}"):
            detail = ApplicationDetailView(ctx, app.id).load()
            if detail is not None:
                st.write(f"Submitted: {detail.created_at:%d %b %Y %H:%M}")
                st.write(f"Last updated: {detail.updated_at:%d %b %Y %H:%M}")
                if detail.service is not None:
                    st.write(f"Fee: {fee_text(detail.service.fee)}")
                st.write("Documents: " + (", ".join(detail.documents) or "none"))
                if detail.notes:
                    st.write(f"Notes: {detail.notes}")

flush_notices(ctx)
