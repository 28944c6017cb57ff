import streamlit as st

from apps.ui.state import flush_notices, page_header, require_login
from services.views.accounts import ProfileForm, ProfileView

ctx = page_header("My Profile")
require_login(ctx)

view = ProfileView(ctx)
st.caption(f"{ctx.user.email or ''} · {ctx.user.role.value}")

with st.form("profile"):
    name = st.text_input("Name", value=view.form.name)
    phone = st.text_input("Phone", value=view.form.phone)
    address = st.text_area("Address", value=view.form.address)
    saved = st.form_submit_button("Save", disabled=not ctx.connected)
if saved and view.save(ProfileForm(name=name, phone=phone, address=address)):
    st.rerun()

flush_notices(ctx)
