import streamlit as st

from apps.ui.state import flush_notices, page_header
from services.views.accounts import LoginView, RegistrationView

ctx = page_header("E-Gram Panchayat")

st.markdown(
    """
Welcome to the village services portal.

- Browse the service catalog and apply online
- Track your applications and notifications
- Staff and administrators review and process applications
"""
)

if ctx.user is not None:
    st.success(f"Welcome back, {ctx.user.name}.")
    if st.button("Sign out"):
        if ctx.sign_out():
            st.session_state.pop("catalog", None)
        st.rerun()
    flush_notices(ctx)
    st.stop()

login_tab, register_tab = st.tabs(["Sign in", "Register"])

with login_tab:
    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", disabled=not ctx.connected)
    if submitted and LoginView(ctx).submit(email, password):
        st.rerun()

with register_tab:
    with st.form("register"):
        name = st.text_input("Full name")
        reg_email = st.text_input("Email", key="reg_email")
        reg_password = st.text_input(
            "Password",
            type="password",
            key="reg_password",
            help=f"At least {ctx.settings.MIN_PASSWORD_LENGTH} characters",
        )
        registered = st.form_submit_button("Create account", disabled=not ctx.connected)
    if registered:
        RegistrationView(ctx).submit(reg_email, reg_password, name)

flush_notices(ctx)
