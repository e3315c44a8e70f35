import logging
from contextlib import contextmanager
from datetime import date
from typing import Optional

import streamlit as st

from truckload.config import Settings, init_logging
from truckload.data import LoadingRepository, get_client, load_dashboard_data
from truckload.dates import WEEKDAY_NAMES, format_full_date, parse_iso_date
from truckload.errors import TruckloadError
from truckload.filters import CalendarState, normalize_calendar_state, normalize_table_filters
from truckload.records import BADGE_LABELS, STATUS_COLORS, STATUS_ORDER, LoadingRecord, LoadingStatus
from truckload.schemas import parse_form
from truckload.view_calendar import compute_calendar, navigate
from truckload.view_charts import compute_charts
from truckload.view_table import compute_table, export_frame, filter_records, next_status

logger = logging.getLogger(__name__)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip {display: inline-block;border-radius: 6px;padding: 2px 6px;margin: 2px 0;font-size: 0.75rem;color: #ffffff;}
        .empty-chart {display: flex;align-items: center;justify-content: center;height: 16rem;color: #6b7280;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if st.button("Novo Carregamento"):
            open_form(None, None)


def status_chip(record: dict) -> str:
    color = STATUS_COLORS[LoadingStatus(record["status"])]
    return f"<span class='chip' style='background:{color}'>{record['status_label']}</span>"


def render_placeholder(title: str):
    with card(title):
        st.markdown("<div class='empty-chart'>Nenhum dado disponível</div>", unsafe_allow_html=True)


# ---------- form state ----------
def open_form(record: Optional[LoadingRecord], initial_date: Optional[date]):
    st.session_state["form_record"] = record
    st.session_state["form_date"] = initial_date
    st.session_state["show_form"] = True
    st.rerun()


def close_form():
    st.session_state["show_form"] = False
    st.session_state["form_record"] = None
    st.session_state["form_date"] = None


def render_form(repo: LoadingRepository):
    record: Optional[LoadingRecord] = st.session_state.get("form_record")
    initial: Optional[date] = st.session_state.get("form_date")
    start_default = parse_iso_date(record.start_date) if record else (initial or date.today())
    end_default = parse_iso_date(record.end_date) if record else (initial or date.today())
    statuses = [s.value for s in STATUS_ORDER]

    with card("Editar Carregamento" if record else "Novo Carregamento"):
        with st.form("loading_form"):
            truck_id = st.text_input("Caminhão", value=record.truck_id if record else "")
            quotation_ref = st.text_input("Cotação", value=record.quotation_ref if record else "")
            quantity = st.text_input("Quantidade", value=record.quantity if record else "")
            carrier = st.text_input("Transportadora", value=record.carrier if record else "")
            start_date = st.date_input("Data Início", value=start_default)
            end_date = st.date_input("Data Fim", value=end_default)
            status = st.selectbox(
                "Status",
                statuses,
                index=statuses.index(record.status.value) if record else 0,
                format_func=lambda s: BADGE_LABELS[LoadingStatus(s)],
            )
            completed_date = st.date_input(
                "Data Realizado",
                value=parse_iso_date(record.completed_date) if record and record.completed_date else None,
            )
            notes = st.text_area("Observações", value=(record.notes or "") if record else "")
            save = st.form_submit_button("Salvar")
            cancel = st.form_submit_button("Cancelar")

        if save:
            try:
                form = parse_form(
                    {
                        "truck_id": truck_id,
                        "quotation_ref": quotation_ref,
                        "quantity": quantity,
                        "carrier": carrier,
                        "start_date": start_date,
                        "end_date": end_date,
                        "completed_date": completed_date,
                        "status": status,
                        "notes": notes,
                    }
                )
                if record:
                    repo.update(record.id, form)
                else:
                    repo.insert(form)
            except TruckloadError as exc:
                st.error(f"Erro ao salvar carregamento. Tente novamente. ({exc})")
            else:
                close_form()
                st.rerun()
        if cancel:
            close_form()
            st.rerun()

        if not record:
            return
        confirmed = st.checkbox("Tem certeza que deseja excluir este carregamento?", key=f"confirm-delete-{record.id}")
        if st.button("Excluir", type="secondary", disabled=not confirmed):
            try:
                repo.delete(record.id)
            except TruckloadError as exc:
                st.error(f"Erro ao excluir carregamento. Tente novamente. ({exc})")
            else:
                close_form()
                st.rerun()


# ---------- pages ----------
def render_calendar_page(records):
    render_page_header("Calendário", "Início / Calendário")
    state: CalendarState = st.session_state.get("calendar_state") or normalize_calendar_state({})

    nav = st.columns([1, 1, 2, 4])
    if nav[0].button("◀"):
        state = navigate(state, -1)
    if nav[1].button("▶"):
        state = navigate(state, 1)
    labels = {"month": "Mês", "week": "Semana", "day": "Dia"}
    view = nav[2].radio("Visão", list(labels), index=list(labels).index(state.view), format_func=labels.get, horizontal=True)
    if view != state.view:
        state = CalendarState(view=view, anchor=state.anchor)
    st.session_state["calendar_state"] = state

    payload = compute_calendar(state, records)
    nav[3].subheader(payload["title"])
    stats = st.columns(3)
    stats[0].metric("Pendentes", payload["stats"]["pending"])
    stats[1].metric("Realizados", payload["stats"]["completed"])
    stats[2].metric("Cancelados", payload["stats"]["cancelled"])

    by_id = {r.id: r for r in records}
    if state.view == "month":
        header = st.columns(7)
        for col, name in zip(header, WEEKDAY_NAMES):
            col.markdown(f"**{name}**")
        cells = [None] * payload["leading_blanks"] + payload["cells"]
        for week_start in range(0, len(cells), 7):
            cols = st.columns(7)
            for col, cell in zip(cols, cells[week_start:week_start + 7]):
                if cell is None:
                    continue
                label = f"**{cell['day']}**" if cell["is_today"] else str(cell["day"])
                col.markdown(label)
                for entry in cell["records"]:
                    col.markdown(status_chip(entry), unsafe_allow_html=True)
                    if col.button(entry["truck_id"], key=f"open-{cell['date']}-{entry['id']}", help=entry["status_label"]):
                        open_form(by_id[entry["id"]], None)
                if cell["overflow"]:
                    col.caption(f"+{cell['overflow']}")
                if col.button("＋", key=f"add-{cell['date']}"):
                    open_form(None, parse_iso_date(cell["date"]))
    else:
        cols = st.columns(len(payload["cells"]))
        for col, cell in zip(cols, payload["cells"]):
            col.markdown(f"**{cell['weekday']} {cell['day']}**")
            for entry in cell["records"]:
                if col.button(f"{entry['truck_id']} · {entry['status_label']}", key=f"open-{cell['date']}-{entry['id']}"):
                    open_form(by_id[entry["id"]], None)
                if state.view == "day":
                    col.caption(f"Transportadora: {entry['carrier']}")
                    col.caption(f"Janela: {format_full_date(entry['start_date'])} até {format_full_date(entry['end_date'])}")
                    if entry["completed_date"]:
                        col.caption(f"Realizado em: {format_full_date(entry['completed_date'])}")
                    if entry["notes"]:
                        col.caption(entry["notes"])
            if col.button("Adicionar Carregamento", key=f"add-{cell['date']}"):
                open_form(None, parse_iso_date(cell["date"]))


def render_table_page(records, repo: LoadingRepository):
    render_page_header("Lista de Carregamentos", "Início / Lista")
    with st.expander("Filtros", expanded=False):
        c = st.columns(3)
        raw = {
            "truck_query": c[0].text_input("Buscar Caminhão", placeholder="Ex: ABC-1234"),
            "carrier_query": c[1].text_input("Buscar Transportadora", placeholder="Ex: Transportes Solar"),
            "quotation_query": c[2].text_input("Buscar Cotação", placeholder="Ex: Soja"),
            "status": c[0].selectbox("Status", ["all", "pending", "completed", "cancelled"],
                                     format_func={"all": "Todos", "pending": "Pendentes", "completed": "Realizados", "cancelled": "Cancelados"}.get),
            "period": c[1].selectbox("Período", ["all", "current_month", "current_week", "next_week"],
                                     format_func={"all": "Todos", "current_month": "Mês Atual", "current_week": "Semana Atual", "next_week": "Próxima Semana"}.get),
        }
    filters = normalize_table_filters(raw)
    payload = compute_table(filters, records)

    if not payload["rows"]:
        st.info("Nenhum carregamento encontrado. Ajuste os filtros ou adicione novos carregamentos.")
        return

    by_id = {r.id: r for r in records}
    for row in payload["rows"]:
        cols = st.columns([2, 2, 2, 1, 3, 2, 2, 1])
        cols[0].markdown(f"**{row['truck_id']}**")
        cols[1].write(row["carrier"])
        cols[2].write(row["quotation_ref"])
        cols[3].write(row["quantity"])
        cols[4].write(row["window"])
        cols[5].write(row["completed_display"])
        if cols[6].button(row["status_label"], key=f"status-{row['id']}"):
            record = by_id[row["id"]]
            try:
                repo.set_status(record.id, next_status(record.status))
            except TruckloadError as exc:
                st.error(f"Erro ao atualizar status. Tente novamente. ({exc})")
            else:
                st.rerun()
        if cols[7].button("Editar", key=f"edit-{row['id']}"):
            open_form(by_id[row["id"]], None)

    count = payload["count"]
    st.caption(f"Exibindo {count} carregamento{'s' if count != 1 else ''}")
    st.download_button(
        "Exportar CSV",
        data=export_frame(filter_records(records, filters)).to_csv(index=False).encode("utf-8"),
        file_name="carregamentos.csv",
        mime="text/csv",
    )


def render_charts_page(records):
    render_page_header("Gráficos de Carregamentos", "Início / Gráficos")
    st.caption("Visualização e análise dos dados de carregamento")
    payload = compute_charts(records)
    use_vega = st.toggle("Gráficos interativos (Vega-Lite)", value=False)

    if payload["svg"]["daily"] is None:
        render_placeholder("Evolução Diária dos Carregamentos")
    else:
        with card("Evolução Diária dos Carregamentos"):
            if use_vega:
                st.vega_lite_chart(payload["charts"]["daily_trend"], use_container_width=True)
            else:
                st.markdown(payload["svg"]["daily"], unsafe_allow_html=True)

    left, right = st.columns(2)
    with left:
        with card("Carregamentos por Status"):
            if use_vega:
                st.vega_lite_chart(payload["charts"]["status_bar"], use_container_width=True)
            else:
                st.markdown(payload["svg"]["status_bar"], unsafe_allow_html=True)
    with right:
        if payload["svg"]["status_pie"] is None:
            render_placeholder("Distribuição por Status")
        else:
            with card("Distribuição por Status"):
                if use_vega:
                    st.vega_lite_chart(payload["charts"]["status_pie"], use_container_width=True)
                else:
                    st.markdown(payload["svg"]["status_pie"], unsafe_allow_html=True)
                for item in payload["percentages"]:
                    st.markdown(f"{item['label']}: **{item['count']}** ({item['percentage']:.1f}%)")
                st.markdown(f"**Total: {payload['total']}**")


# ---------- UI setup ----------
st.set_page_config(page_title="Controle de Carregamentos", layout="wide")
settings = Settings.from_env()
init_logging(settings)
inject_base_styles()
st.title("Controle de Carregamentos")

try:
    repo = LoadingRepository(get_client(settings), table=settings.table)
    data_ctx = load_dashboard_data(repo)
except TruckloadError as exc:
    logger.exception("Dashboard data could not be loaded")
    st.error(f"Erro ao carregar os dados. Tente novamente. ({exc})")
    st.stop()

records = data_ctx["records"]
if data_ctx["rejected"]:
    st.warning(f"{data_ctx['rejected']} registro(s) com dados inválidos foram ignorados.")

with st.sidebar:
    st.markdown("### Navegar")
    page = st.radio("Navegar", ["Calendário", "Lista", "Gráficos"], index=0)

if st.session_state.get("show_form"):
    render_form(repo)

if page == "Calendário":
    render_calendar_page(records)
elif page == "Lista":
    render_table_page(records, repo)
else:
    render_charts_page(records)
