import streamlit as st

from apps.ui.state import flush_notices, page_header, require_capability, status_badge
from domain.capabilities import Capability
from services.views.accounts import StaffRegistrationView
from services.views.dashboards import AdminDashboard

ctx = page_header("Administration")
require_capability(ctx, Capability.VIEW_STAFF_ACTIVITY, "You must be an admin to access this page.")

dash = AdminDashboard(ctx)
dash.load()

cols = st.columns(3)
for col, (status, count) in zip(cols, dash.headline.items()):
    col.metric(status.replace("_", " ").title(), count)

st.subheader("Staff activity")
if not dash.activities:
    st.write("No processed applications yet.")
for activity in dash.activities:
    st.markdown(
        f"{activity.created_at:%d %b %Y} · **{activity.staff_name}** · "
        f"application `{activity.application_id}` · {status_badge(activity.status)}"
    )

st.subheader("Register staff member")
with st.form("register_staff", clear_on_submit=True):
    name = st.text_input("Full name")
    email = st.text_input("Email")
    password = st.text_input("Password", type="password")
    submitted = st.form_submit_button("Create staff account", disabled=not ctx.connected)
if submitted:
    StaffRegistrationView(ctx).submit(email, password, name)

flush_notices(ctx)
