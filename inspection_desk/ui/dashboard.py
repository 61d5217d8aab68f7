"""Streamlit dashboard to build inspections and track clients and invoices."""
import base64
from dataclasses import replace
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List

import streamlit as st

# Allow running via "streamlit run inspection_desk/ui/dashboard.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from inspection_desk.core.catalog import INSPECTION_CATEGORIES, points_for
from inspection_desk.core.formatting import format_currency, format_date, parse_calendar_date
from inspection_desk.core.ids import default_generator, new_client_id, new_invoice_id
from inspection_desk.core.logging import configure_logging
from inspection_desk.core.models import (
    CLIENT_PROPERTY_TYPES,
    INVOICE_STATUSES,
    INVOICE_TEMPLATES,
    ITEM_STATUSES,
    PROPERTY_TYPES,
    Client,
    ClientProperty,
    InspectionArea,
    InspectionItem,
    Invoice,
    InvoiceServiceItem,
    Photo,
)
from inspection_desk.core.quality import invoice_findings, validate_inspection
from inspection_desk.core.utils import resolve_data_dir
from inspection_desk.editing import InspectionEditor, SuggestionJobs, analysis_key, summary_key
from inspection_desk.processing.aggregation import (
    dashboard_counts,
    failed_items,
    outstanding_balance,
    recent,
    status_breakdown,
)
from inspection_desk.processing.suggestions import TextSuggestionService
from inspection_desk.reporting.sinks import export_inspection, export_invoices
from inspection_desk.storage import Repositories, open_repositories

PAGES = ["Dashboard", "Inspections", "Clients", "Invoices"]


def _repositories() -> Repositories:
    if "repos" not in st.session_state:
        st.session_state.repos = open_repositories(resolve_data_dir())
    return st.session_state.repos


def _jobs() -> SuggestionJobs:
    if "suggestion_jobs" not in st.session_state:
        st.session_state.suggestion_jobs = SuggestionJobs(TextSuggestionService())
    return st.session_state.suggestion_jobs


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _editor() -> InspectionEditor | None:
    return st.session_state.get("editor")


def _close_editor() -> None:
    st.session_state.pop("editor", None)


# -- dashboard ---------------------------------------------------------------


def _render_dashboard(repos: Repositories) -> None:
    inspections = repos.inspections.list_all()
    clients = repos.clients.list_all()
    invoices = repos.invoices.list_all()
    counts = dashboard_counts(inspections, clients, invoices)

    st.caption(format_date(date.today().isoformat()))
    metric_cols = st.columns(4)
    metric_cols[0].metric("Inspections", counts.total_inspections)
    metric_cols[1].metric("Clients", counts.total_clients)
    metric_cols[2].metric("Invoices", counts.total_invoices)
    metric_cols[3].metric("Revenue", format_currency(counts.revenue))

    recent_cols = st.columns(2)
    with recent_cols[0]:
        st.subheader("Recent inspections")
        for inspection in recent(inspections):
            st.markdown(f"**{inspection.client_name or 'Unnamed client'}** - {inspection.property_location}")
            st.caption(format_date(inspection.inspection_date))
        if not inspections:
            st.info("No inspections yet.")
    with recent_cols[1]:
        st.subheader("Recent invoices")
        for invoice in recent(invoices):
            st.markdown(f"**{invoice.client_name}** - {format_currency(invoice.total_amount)} ({invoice.status})")
            st.caption(f"Invoice #{invoice.invoice_number}")
        if not invoices:
            st.info("No invoices yet.")

    if inspections:
        totals: Dict[str, int] = {status: 0 for status in ITEM_STATUSES}
        for inspection in inspections:
            for status, count in status_breakdown(inspection).items():
                totals[status] = totals.get(status, 0) + count
        st.caption("Inspection point results across all inspections")
        st.bar_chart(totals)


# -- inspections -------------------------------------------------------------


def _render_inspection_list(repos: Repositories) -> None:
    if st.button("➕ New inspection", type="primary"):
        editor = InspectionEditor(repos.inspections)
        editor.new()
        st.session_state.editor = editor
        _rerun_app()

    inspections = repos.inspections.list_all()
    if not inspections:
        st.info("No inspections saved yet.")
    for inspection in inspections:
        cols = st.columns([4, 1, 1, 1])
        cols[0].markdown(
            f"**{inspection.client_name or 'Unnamed client'}** - {inspection.property_location}  \n"
            f"{inspection.property_type} · {format_date(inspection.inspection_date)} · {inspection.inspector_name}"
        )
        if cols[1].button("Edit", key=f"edit_{inspection.id}"):
            editor = InspectionEditor(repos.inspections)
            if editor.load(inspection.id) is None:
                st.error("Inspection not found.")
            else:
                st.session_state.editor = editor
                _rerun_app()
        if cols[2].button("Export", key=f"export_{inspection.id}"):
            target = export_inspection(inspection, Path("output") / f"{inspection.id}.xlsx", sink="excel")
            st.success(f"Checklist saved to {target.resolve()}")
        if cols[3].button("Delete", key=f"delete_{inspection.id}"):
            repos.inspections.delete(inspection.id)
            _rerun_app()


def _analyze_photo(editor: InspectionEditor, area_id: int, item: InspectionItem, index: int) -> None:
    _jobs().submit_defect_analysis(editor, area_id, item.id, index, item.photos[index], item.point)


def _generate_summary(editor: InspectionEditor) -> None:
    _jobs().submit_report_summary(editor, failed_items(editor.draft))


def _merge_finished_suggestions(editor: InspectionEditor) -> None:
    """Apply finished AI results before the editor widgets are drawn."""

    for job in _jobs().collect(editor):
        if not job.applied:
            continue
        if job.item_id is not None:
            updated = next(
                i for a in editor.draft.areas if a.id == job.area_id for i in a.items if i.id == job.item_id
            )
            st.session_state[f"comments_{job.item_id}"] = updated.comments
        else:
            st.session_state[f"summary_{editor.draft.id}"] = editor.draft.ai_summary


@st.fragment(run_every=1)
def _poll_suggestions() -> None:
    if _jobs().has_finished():
        _rerun_app()


def _render_item(editor: InspectionEditor, area_id: int, item: InspectionItem) -> None:
    st.markdown(f"**{item.category}** - {item.point}")
    cols = st.columns([1, 2])
    status = cols[0].selectbox(
        "Status",
        ITEM_STATUSES,
        index=ITEM_STATUSES.index(item.status) if item.status in ITEM_STATUSES else None,
        placeholder=f"Unknown status {item.status!r}",
        key=f"status_{item.id}",
    )
    if status is None:
        status = item.status
    location = cols[1].text_input(
        "Location", value=item.location, placeholder="e.g., Master Bedroom Ceiling", key=f"location_{item.id}"
    )
    comments = st.text_area("Comments", value=item.comments, key=f"comments_{item.id}")
    updates = {
        field: value
        for field, value in (("status", status), ("location", location), ("comments", comments))
        if value != getattr(item, field)
    }
    if updates:
        item = editor.update_item(area_id, item.id, **updates)

    if item.photos:
        photo_cols = st.columns(min(len(item.photos), 4))
        for index, photo in enumerate(item.photos):
            with photo_cols[index % len(photo_cols)]:
                st.image(base64.b64decode(photo.image_data), caption=photo.file_name, use_container_width=True)
                analyzing = _jobs().is_pending(analysis_key(item.id, index))
                st.button(
                    "Analyzing..." if analyzing else "🤖 AI analyze",
                    key=f"analyze_{item.id}_{index}",
                    disabled=analyzing,
                    on_click=_analyze_photo,
                    args=(editor, area_id, item, index),
                )
                st.button(
                    "Remove photo",
                    key=f"detach_{item.id}_{index}",
                    disabled=analyzing,
                    on_click=editor.detach_photo,
                    args=(area_id, item.id, index),
                )

    uploads = st.file_uploader(
        "Add photos",
        type=["jpg", "jpeg", "png", "webp"],
        accept_multiple_files=True,
        key=f"upload_{item.id}_{len(item.photos)}",
    )
    if uploads:
        for upload in uploads:
            encoded = base64.b64encode(upload.getvalue()).decode("ascii")
            editor.attach_photo(area_id, item.id, Photo(image_data=encoded, file_name=upload.name))
        _rerun_app()

    st.button("Remove point", key=f"remove_item_{item.id}", on_click=editor.remove_item, args=(area_id, item.id))
    st.divider()


def _render_area(editor: InspectionEditor, area: InspectionArea) -> None:
    with st.expander(area.name or "Unnamed area", expanded=True):
        name = st.text_input("Area name", value=area.name, key=f"area_name_{area.id}")
        if name != area.name:
            editor.update_area(area.id, name=name)

        for item in area.items:
            _render_item(editor, area.id, item)

        pick_cols = st.columns(2)
        category = pick_cols[0].selectbox("Category", list(INSPECTION_CATEGORIES), key=f"category_{area.id}")
        point = pick_cols[1].selectbox("Inspection point", points_for(category), key=f"point_{area.id}")
        button_cols = st.columns(2)
        button_cols[0].button(
            "Add inspection point",
            key=f"add_item_{area.id}",
            on_click=editor.add_item,
            args=(area.id, category, point),
        )
        button_cols[1].button("Remove area", key=f"remove_area_{area.id}", on_click=editor.remove_area, args=(area.id,))


def _render_editor(editor: InspectionEditor) -> None:
    _merge_finished_suggestions(editor)
    if _jobs().has_pending():
        _poll_suggestions()
    draft = editor.draft
    st.subheader("Inspection details")
    detail_cols = st.columns(2)
    fields = {
        "client_name": detail_cols[0].text_input("Client name", value=draft.client_name, key=f"client_{draft.id}"),
        "property_location": detail_cols[1].text_input(
            "Property location", value=draft.property_location, key=f"location_{draft.id}"
        ),
        "inspector_name": detail_cols[0].text_input(
            "Inspector name", value=draft.inspector_name, key=f"inspector_{draft.id}"
        ),
        "property_type": detail_cols[1].selectbox(
            "Property type",
            PROPERTY_TYPES,
            index=PROPERTY_TYPES.index(draft.property_type) if draft.property_type in PROPERTY_TYPES else 0,
            key=f"type_{draft.id}",
        ),
    }
    stored_date = parse_calendar_date(draft.inspection_date)
    picked_date = detail_cols[0].date_input(
        "Inspection date",
        value=stored_date or (None if draft.inspection_date else date.today()),
        key=f"date_{draft.id}",
    )
    if picked_date is not None:
        fields["inspection_date"] = picked_date.isoformat()
    elif draft.inspection_date:
        detail_cols[0].caption(f"Stored date {draft.inspection_date!r} is not a calendar date; pick one to replace it.")
    changed = {field: value for field, value in fields.items() if value != getattr(draft, field)}
    if changed:
        editor.update_fields(**changed)

    for area in editor.draft.areas:
        _render_area(editor, area)
    st.button("Add another area", on_click=editor.add_area)

    st.subheader("Summary of findings")
    summary = st.text_area("AI summary", value=editor.draft.ai_summary or "", key=f"summary_{draft.id}")
    if summary != (editor.draft.ai_summary or ""):
        editor.update_fields(ai_summary=summary)
    summarizing = _jobs().is_pending(summary_key(draft.id))
    st.button(
        "Generating summary..." if summarizing else "🤖 Generate AI summary",
        disabled=summarizing or not failed_items(editor.draft),
        on_click=_generate_summary,
        args=(editor,),
    )

    issues = validate_inspection(editor.draft)
    for issue in issues:
        st.warning(issue)

    final_cols = st.columns(2)
    if final_cols[0].button("Cancel"):
        editor.cancel()
        _close_editor()
        _rerun_app()
    if final_cols[1].button("Save inspection", type="primary", disabled=bool(issues)):
        editor.save()
        _close_editor()
        st.session_state["last_action"] = "Inspection saved."
        _rerun_app()


# -- clients and invoices ----------------------------------------------------


def _render_clients(repos: Repositories) -> None:
    with st.form("new_client", clear_on_submit=True):
        st.subheader("Add client")
        name = st.text_input("Name")
        email = st.text_input("Email")
        phone = st.text_input("Phone")
        address = st.text_area("Address")
        if st.form_submit_button("Save client") and name.strip():
            repos.clients.save(Client(id=new_client_id(), name=name.strip(), email=email, phone=phone, address=address))
            st.success(f"Client '{name}' saved.")

    for client in repos.clients.list_all():
        with st.expander(client.name):
            st.write(f"{client.email} · {client.phone}")
            st.text(client.address)
            if client.properties:
                st.dataframe(
                    [
                        {"Location": prop.location, "Type": prop.type, "Size (m²)": prop.size}
                        for prop in client.properties
                    ],
                    hide_index=True,
                    use_container_width=True,
                )
            with st.form(f"property_{client.id}", clear_on_submit=True):
                prop_cols = st.columns(3)
                location = prop_cols[0].text_input("Property location")
                prop_type = prop_cols[1].selectbox("Type", CLIENT_PROPERTY_TYPES, index=1)
                size = prop_cols[2].number_input("Size (m²)", min_value=0.0, value=0.0)
                if st.form_submit_button("Add property") and location.strip():
                    prop = ClientProperty(
                        id=f"prop_{default_generator().next_id()}", location=location.strip(), type=prop_type, size=size
                    )
                    repos.clients.save(replace(client, properties=[*client.properties, prop]))
                    _rerun_app()
            if st.button("Delete client", key=f"delete_client_{client.id}"):
                repos.clients.delete(client.id)
                _rerun_app()


def _render_new_invoice(repos: Repositories, clients: List[Client]) -> None:
    if not clients:
        st.info("Add a client before creating invoices.")
        return
    with st.form("new_invoice", clear_on_submit=True):
        st.subheader("New invoice")
        client = st.selectbox("Client", clients, format_func=lambda c: c.name)
        cols = st.columns(3)
        number = cols[0].text_input("Invoice number")
        invoice_date = cols[1].date_input("Invoice date", value=date.today())
        due_date = cols[2].date_input("Due date", value=date.today() + timedelta(days=30))
        location = st.selectbox(
            "Property", [prop.location for prop in client.properties] or [""], key="invoice_property"
        )
        lines = st.data_editor(
            [{"Description": "", "Quantity": 1.0, "Unit price": 0.0}],
            num_rows="dynamic",
            use_container_width=True,
            key="invoice_lines",
        )
        tax_rate = st.number_input("Tax rate (%)", min_value=0.0, value=5.0)
        status = st.selectbox("Status", INVOICE_STATUSES, index=INVOICE_STATUSES.index("Unpaid"))
        amount_paid = st.number_input("Amount paid", min_value=0.0, value=0.0)
        template = st.selectbox("Print template", INVOICE_TEMPLATES)
        notes = st.text_area("Notes")
        if st.form_submit_button("Save invoice") and number.strip():
            services = [
                InvoiceServiceItem(
                    id=f"svc_{index + 1}",
                    description=line.get("Description") or "",
                    quantity=float(line.get("Quantity") or 0),
                    unit_price=float(line.get("Unit price") or 0),
                    total=round(float(line.get("Quantity") or 0) * float(line.get("Unit price") or 0), 2),
                )
                for index, line in enumerate(lines)
                if line.get("Description")
            ]
            subtotal = round(sum(service.total for service in services), 2)
            tax = round(subtotal * tax_rate / 100, 2)
            repos.invoices.save(
                Invoice(
                    id=new_invoice_id(),
                    invoice_number=number.strip(),
                    invoice_date=invoice_date.isoformat(),
                    due_date=due_date.isoformat(),
                    client_id=client.id,
                    client_name=client.name,
                    client_address=client.address,
                    client_email=client.email,
                    property_location=location,
                    services=services,
                    subtotal=subtotal,
                    tax=tax,
                    total_amount=round(subtotal + tax, 2),
                    amount_paid=amount_paid,
                    status=status,
                    notes=notes or None,
                    template=template,
                )
            )
            st.success(f"Invoice #{number} saved.")


def _render_invoices(repos: Repositories) -> None:
    invoices = repos.invoices.list_all()
    findings = invoice_findings(invoices)

    cols = st.columns(2)
    cols[0].metric("Billed", format_currency(sum(invoice.total_amount for invoice in invoices)))
    cols[1].metric("Outstanding", format_currency(outstanding_balance(invoices)))

    _render_new_invoice(repos, repos.clients.list_all())

    rows = [
        {
            "Invoice": invoice.invoice_number,
            "Date": format_date(invoice.invoice_date),
            "Due": format_date(invoice.due_date),
            "Client": invoice.client_name,
            "Total": format_currency(invoice.total_amount),
            "Paid": format_currency(invoice.amount_paid),
            "Status": invoice.status,
            "Warnings": "; ".join(findings.get(invoice.id, [])),
        }
        for invoice in invoices
    ]
    if rows:
        st.dataframe(rows, hide_index=True, use_container_width=True)
        if st.button("Export register to Excel"):
            target = export_invoices(invoices, Path("output") / "invoices.xlsx", sink="excel")
            st.success(f"Invoice register saved to {target.resolve()}")
    else:
        st.info("No invoices yet.")


def main() -> None:
    configure_logging()
    st.set_page_config(page_title="Inspection Desk", layout="wide")
    repos = _repositories()

    with st.sidebar:
        st.title("Inspection Desk")
        page = st.radio("Navigate", PAGES, key="page")

    last_action = st.session_state.pop("last_action", None)
    if last_action:
        st.success(last_action)

    st.header(page)
    if page == "Dashboard":
        _render_dashboard(repos)
    elif page == "Inspections":
        editor = _editor()
        if editor is not None and editor.draft is not None:
            _render_editor(editor)
        else:
            _render_inspection_list(repos)
    elif page == "Clients":
        _render_clients(repos)
    else:
        _render_invoices(repos)


if __name__ == "__main__":
    main()
