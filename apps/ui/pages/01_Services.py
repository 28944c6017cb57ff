import streamlit as st

from apps.ui.state import fee_text, flush_notices, page_header
from domain.capabilities import Capability
from services.views.catalog import CatalogView, ServiceForm

ctx = page_header("Services")

if "catalog" not in st.session_state or st.session_state.catalog.ctx is not ctx:
    st.session_state.catalog = CatalogView(ctx)
catalog: CatalogView = st.session_state.catalog
catalog.load()

if catalog.using_placeholders:
    st.info("Showing sample services while the database is unavailable.")

term = st.text_input("Search services", value=catalog.search_term)
services = catalog.search(term)


def _service_form(key: str, form: ServiceForm) -> ServiceForm | None:
    with st.form(key):
        name = st.text_input("Name", value=form.name)
        description = st.text_area("Description", value=form.description)
        docs = st.text_input("Documents required (comma separated)", value=form.documents_required)
        fee = st.number_input("Fee (₹)", min_value=0.0, value=float(form.fee or 0), step=10.0)
        processing_time = st.text_input("Processing time", value=form.processing_time)
        if st.form_submit_button("Save"):
            return ServiceForm(name, description, docs, fee, processing_time)
    return None


if catalog.can_manage:
    with st.expander("Add a service"):
        new = _service_form("new_service", ServiceForm())
        if new is not None and catalog.create(new):
            st.rerun()

if not services:
    st.write("No services match your search.")

for service in services:
    with st.container(border=True):
        st.subheader(service.name)
        st.write(service.description)
        cols = st.columns(3)
        cols[0].metric("Fee", fee_text(service.fee))
        cols[1].metric("Processing time", service.processing_time or "-")
        cols[2].write("**Documents required**\n\n" + "\n".join(f"- {d}" for d in service.documents_required))

        if ctx.can(Capability.APPLY) and not catalog.using_placeholders:
            if st.button("Apply", key=f"apply_{service.id}"):
                st.session_state.apply_service_id = service.id
                st.switch_page("pages/02_Apply.py")

        if catalog.can_manage and not catalog.using_placeholders:
            with st.expander("Edit"):
                edited = _service_form(f"edit_{service.id}", ServiceForm.from_service(service))
                if edited is not None and catalog.update(service.id, edited):
                    st.rerun()
            label = "Confirm delete" if catalog.is_armed(service.id) else "Delete"
            left, right = st.columns(2)
            if left.button(label, key=f"delete_{service.id}", type="primary"):
                catalog.delete(service.id)
                st.rerun()
            if catalog.is_armed(service.id) and right.button("Cancel", key=f"cancel_{service.id}"):
                catalog.cancel_delete(service.id)
                st.rerun()

flush_notices(ctx)
