import streamlit as st

from apps.ui.state import fee_text, flush_notices, page_header, require_capability
from domain.capabilities import Capability
from services.views.submission import ApplicationFormView

ctx = page_header("Apply for a Service")
require_capability(ctx, Capability.APPLY, "Only citizen accounts can apply for services.")

service_id = st.session_state.get("apply_service_id")
if not service_id:
    st.info("Choose a service from the catalog first.")
    st.page_link("pages/01_Services.py", label="Browse services")
    st.stop()

view = ApplicationFormView(ctx, service_id)
service = view.load()
if service is None:
    flush_notices(ctx)
    st.stop()

st.subheader(service.name)
st.write(service.description)
st.caption(f"Fee: {fee_text(service.fee)} · Processing time: {service.processing_time or '-'}")

with st.form("apply"):
    for i, slot in enumerate(view.slots):
        upload = st.file_uploader(slot.name, key=f"doc_{service_id}_{i}")
        view.attach(i, upload.name if upload is not None else None)
    view.notes = st.text_area("Additional notes")
    submitted = st.form_submit_button("Submit application", disabled=not ctx.connected)

if submitted:
    app = view.submit()
    if app is not None:
        st.session_state.pop("apply_service_id", None)
        st.switch_page("pages/03_My_Applications.py")

flush_notices(ctx)
