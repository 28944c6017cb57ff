import streamlit as st

from apps.ui.state import flush_notices, page_header, require_login, status_badge
from services.views.dashboards import CitizenDashboard

ctx = page_header("Dashboard")
require_login(ctx)

dash = CitizenDashboard(ctx)
dash.load()

apps_col, notes_col = st.columns(2)

with apps_col:
    st.subheader("Recent applications")
    for app in dash.displayed_applications:
        name = app.service.name if app.service else "Unknown service"
        st.markdown(f"**{name}** · {status_badge(app.status)} · {app.created_at:%d %b %Y}")
    st.page_link("pages/03_My_Applications.py", label="All applications")

with notes_col:
    st.subheader(f"Notifications ({dash.unread} unread)")
    for n in dash.displayed_notifications:
        with st.container(border=True):
            st.markdown(f"**{n.title}**" if not n.is_read else n.title)
            st.caption(f"{n.created_at:%d %b %Y}")
            st.write(n.message)
            if dash.notifications and not n.is_read and st.button("Mark as read", key=f"read_{n.id}"):
                dash.mark_read(n.id)
                st.rerun()

flush_notices(ctx)
