"""
Laundry Booking — Admin Dashboard

Run with:  streamlit run app.py
"""

import asyncio
from datetime import datetime

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from laundry_dashboard.auth import TokenStore, login_admin, logout_admin
from laundry_dashboard.config import CURRENCY, VIEW_MODES
from laundry_dashboard.dashboard import (
    OrderBook,
    daily_revenue,
    get_dashboard_summary,
    get_statistics_summary,
    orders_to_frame,
)
from laundry_dashboard.errors import DashboardError
from laundry_dashboard.kpis import (
    OrderFilters,
    apply_order_filters,
    filter_options,
    service_counts,
)
from laundry_dashboard.loaders import (
    ApiClient,
    create_camp,
    create_payment_method,
    create_pickup_slot,
    delete_camp,
    delete_payment_method,
    delete_pickup_slot,
    delete_service_image,
    fetch_camps,
    fetch_laundry_orders,
    get_services,
    get_settings,
    update_camp,
    update_service_image,
    update_service_price,
)
from laundry_dashboard.simulator import build_demo_transport, generate_raw_collections

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Laundry Admin Dashboard",
    layout="wide",
    initial_sidebar_state="expanded",
)

STATUS_COLORS = {
    "pending": "#f39c12",
    "completed": "#2ecc71",
    "cancelled": "#e74c3c",
}

token_store = TokenStore()


# ---------------------------------------------------------------------------
# Backend access
# ---------------------------------------------------------------------------
def make_client() -> ApiClient:
    if st.session_state.get("demo"):
        if "demo_transport" not in st.session_state:
            st.session_state["demo_transport"] = build_demo_transport(generate_raw_collections())
        return ApiClient(lambda: "demo-token", transport=st.session_state["demo_transport"])
    return ApiClient(token_store)


def call(action, *args):
    """Run one backend action on a fresh client and return its result."""
    async def _run():
        async with make_client() as client:
            return await action(client, *args)
    return asyncio.run(_run())


def view_orders(view: str, refresh: bool = False) -> list:
    """Each screen keeps its own order list and refreshes independently."""
    key = f"orders_{view}"
    if refresh or key not in st.session_state:
        try:
            st.session_state[key] = call(fetch_laundry_orders)
            st.session_state[f"{key}_updated"] = datetime.now()
            st.session_state.pop(f"{key}_error", None)
        except DashboardError as exc:
            st.session_state.setdefault(key, [])
            st.session_state[f"{key}_error"] = str(exc)
    if st.session_state.get(f"{key}_error"):
        st.error(st.session_state[f"{key}_error"])
    return st.session_state[key]


def set_order_status(order_id, status: str) -> None:
    """Optimistic edit on the orders screen's list; reverted if the write fails."""
    orders = st.session_state["orders_orders"]

    async def _run():
        async with make_client() as client:
            book = OrderBook(client)
            book.orders = orders
            try:
                await book.set_status(order_id, status)
            except DashboardError:
                st.session_state["orders_orders_error"] = book.error

    asyncio.run(_run())


def refresh_bar(view: str) -> bool:
    col1, col2 = st.columns([1, 5])
    clicked = col1.button("Refresh", key=f"refresh_{view}")
    updated = st.session_state.get(f"orders_{view}_updated")
    if updated:
        col2.caption(f"Last updated: {updated:%H:%M:%S}")
    return clicked


def money(value) -> str:
    return f"${value:,.2f}"


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("Laundry Admin")
st.sidebar.toggle("Use demo data", key="demo")
st.sidebar.divider()

page = st.sidebar.radio(
    "Navigate",
    ["Dashboard", "Orders", "Statistics", "Camps", "Control Panel", "Account"],
)


# ===========================================================================
# PAGE: Dashboard
# ===========================================================================
if page == "Dashboard":
    st.title("Dashboard")
    st.caption("Welcome back, Admin! Here's a quick summary of today's activity.")
    orders = view_orders("dashboard", refresh=refresh_bar("dashboard"))
    summary = get_dashboard_summary(orders)

    col1, col2, col3 = st.columns(3)
    col4, col5 = st.columns(2)
    col1.metric("Today's Orders", summary["todays_orders"])
    col2.metric("Pending Orders", summary["outstanding_orders"])
    col3.metric("Completed Today", summary["completed_today"])
    col4.metric("Estimated Revenue Today", money(summary["estimated_revenue_today"]))
    col5.metric("Active Customers Today", summary["active_customers_today"])


# ===========================================================================
# PAGE: Orders
# ===========================================================================
elif page == "Orders":
    st.title("Orders")
    orders = view_orders("orders", refresh=refresh_bar("orders"))
    options = filter_options(orders)

    with st.expander("Filters"):
        col1, col2, col3 = st.columns(3)
        filters = OrderFilters(
            customer_name=col1.selectbox("Customer", ["all"] + options["customer_name"]),
            camp_name=col2.selectbox("Camp", ["all"] + options["camp_name"]),
            room_number=col3.selectbox("Room", ["all"] + options["room_number"]),
            service=col1.selectbox("Service", ["all"] + options["service"]),
            payment_status=col2.selectbox("Payment", ["all", "confirmed", "unconfirmed"]),
            pickup_method=col3.selectbox("Pickup method", ["all"] + options["pickup_method"]),
            min_price=col1.text_input("Min price"),
            max_price=col2.text_input("Max price"),
        )

    mode = st.radio("Show", VIEW_MODES, horizontal=True)
    visible = apply_order_filters(orders, filters, mode)
    st.caption(f"{len(visible)} of {len(orders)} orders")

    for order in visible:
        color = STATUS_COLORS.get(order.order_status, "#95a5a6")
        with st.container(border=True):
            left, right = st.columns([4, 1])
            left.markdown(
                f"**{order.customer_name}** · Room {order.room_number} · {order.camp_name}  \n"
                f"{', '.join(s.name for s in order.services) or '—'} · "
                f"{order.total_price} {CURRENCY} · "
                f"<span style='color:{color}'>{order.order_status}</span>  \n"
                f"<small>{order.order_timestamp}</small>",
                unsafe_allow_html=True,
            )
            if order.order_status == "cancelled":
                continue
            next_status = "pending" if order.order_status == "completed" else "completed"
            if right.button(f"Mark {next_status}", key=f"toggle_{order.id}"):
                set_order_status(order.id, next_status)
                st.rerun()
            if right.button("Cancel", key=f"cancel_{order.id}"):
                set_order_status(order.id, "cancelled")
                st.rerun()


# ===========================================================================
# PAGE: Statistics
# ===========================================================================
elif page == "Statistics":
    st.title("Statistics")
    orders = view_orders("statistics", refresh=refresh_bar("statistics"))
    stats = get_statistics_summary(orders)

    cols = st.columns(3)
    cards = [
        ("Total Orders (All Time)", stats["total_orders"]),
        ("Completed Orders", stats["completed_orders"]),
        ("Pending Orders", stats["pending_orders"]),
        ("Cancelled Orders (All Time)", stats["cancelled_orders"]),
        ("Revenue This Month", money(stats["revenue_this_month"])),
        ("Total Revenue (All Time)", money(stats["total_revenue"])),
        ("Orders This Month", stats["orders_this_month"]),
        ("Average Order Value (AOV)", money(stats["average_order_value"])),
        ("Most Popular Service",
         f"{stats['most_popular_service']} ({stats['most_popular_service_count']} orders)"),
        ("Cancelled Orders (This Month)", stats["cancelled_this_month"]),
    ]
    for i, (label, value) in enumerate(cards):
        cols[i % 3].metric(label, value)

    st.divider()
    revenue = daily_revenue(orders)
    if not revenue.empty:
        fig = go.Figure(go.Bar(x=revenue["date"], y=revenue["revenue"], marker_color="#3498db"))
        fig.update_layout(
            title="Daily Revenue",
            yaxis_title=CURRENCY,
            height=360,
            plot_bgcolor="rgba(0,0,0,0)",
        )
        st.plotly_chart(fig, use_container_width=True)

    counts = service_counts(orders)
    if counts:
        st.plotly_chart(
            px.pie(names=list(counts), values=list(counts.values()), title="Services Booked"),
            use_container_width=True,
        )

    frame = orders_to_frame(orders)
    if not frame.empty:
        st.dataframe(frame.drop(columns=["ordered_at"]), use_container_width=True, hide_index=True)


# ===========================================================================
# PAGE: Camps
# ===========================================================================
elif page == "Camps":
    st.title("Camps")
    try:
        camps = call(fetch_camps)
    except DashboardError as exc:
        st.error(str(exc))
        camps = []

    new_name = st.text_input("New camp name")
    if st.button("Add camp") and new_name.strip():
        try:
            call(create_camp, new_name.strip())
            st.rerun()
        except DashboardError as exc:
            st.error(str(exc))

    for camp in camps:
        col1, col2, col3 = st.columns([4, 1, 1])
        name = col1.text_input("Name", camp["name"], key=f"camp_{camp['id']}", label_visibility="collapsed")
        if col2.button("Save", key=f"save_camp_{camp['id']}"):
            try:
                call(update_camp, camp["id"], name)
                st.rerun()
            except DashboardError as exc:
                st.error(str(exc))
        if col3.button("Delete", key=f"delete_camp_{camp['id']}"):
            try:
                call(delete_camp, camp["id"])
                st.rerun()
            except DashboardError as exc:
                st.error(str(exc))


# ===========================================================================
# PAGE: Control Panel
# ===========================================================================
elif page == "Control Panel":
    st.title("Control Panel")
    try:
        settings = call(get_settings)
    except DashboardError as exc:
        st.error(str(exc))
        st.stop()

    st.subheader("Service Prices")
    for service in settings["prices"]:
        col1, col2, col3 = st.columns([3, 2, 1])
        col1.write(service["name"])
        price = col2.text_input("Price", str(service["price"]), key=f"price_{service['id']}",
                                label_visibility="collapsed")
        if col3.button("Save", key=f"save_price_{service['id']}"):
            try:
                call(update_service_price, service["id"], price)
                st.success(f"Updated {service['name']}")
            except DashboardError as exc:
                st.error(str(exc))

    st.subheader("Service Images")
    try:
        services = call(get_services)
    except DashboardError as exc:
        st.error(str(exc))
        services = []
    for service in services:
        col1, col2, col3 = st.columns([2, 3, 1])
        col1.write(service["name"])
        if service["image"] and isinstance(service["image"], str):
            col1.image(service["image"], width=96)
        upload = col2.file_uploader(
            "Image", type=["jpg", "jpeg", "png", "gif"], key=f"image_{service['id']}",
            label_visibility="collapsed",
        )
        if upload is not None and col2.button("Upload", key=f"upload_image_{service['id']}"):
            try:
                call(update_service_image, service["id"], upload.name, upload.getvalue(), upload.type)
                st.rerun()
            except DashboardError as exc:
                st.error(str(exc))
        if service["image"] and col3.button("Delete", key=f"delete_image_{service['id']}"):
            try:
                call(delete_service_image, service["id"])
                st.rerun()
            except DashboardError as exc:
                st.error(str(exc))

    st.subheader("Pickup Slots")
    for slot in settings["pickup_slots"]:
        col1, col2 = st.columns([4, 1])
        col1.write(slot["time"])
        if col2.button("Delete", key=f"delete_slot_{slot['id']}"):
            try:
                call(delete_pickup_slot, slot["id"])
                st.rerun()
            except DashboardError as exc:
                st.error(str(exc))
    new_slot = st.text_input("New slot time (HH:MM)")
    if st.button("Add slot") and new_slot.strip():
        try:
            call(create_pickup_slot, new_slot.strip())
            st.rerun()
        except DashboardError as exc:
            st.error(str(exc))

    st.subheader("Payment Methods")
    for method in settings["payment_methods"]:
        col1, col2 = st.columns([4, 1])
        col1.write(method["name"])
        if col2.button("Delete", key=f"delete_method_{method['id']}"):
            try:
                call(delete_payment_method, method["id"])
                st.rerun()
            except DashboardError as exc:
                st.error(str(exc))
    new_method = st.text_input("New payment method")
    if st.button("Add payment method") and new_method.strip():
        try:
            call(create_payment_method, new_method.strip())
            st.rerun()
        except DashboardError as exc:
            st.error(str(exc))


# ===========================================================================
# PAGE: Account
# ===========================================================================
elif page == "Account":
    st.title("Account")
    if token_store.get():
        st.success("Logged in.")
        if st.button("Log out"):
            logout_admin(token_store)
            st.rerun()
    else:
        with st.form("login"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in"):
                try:
                    asyncio.run(login_admin(username, password, token_store))
                    st.rerun()
                except DashboardError as exc:
                    st.error(str(exc))
