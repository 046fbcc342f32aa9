import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from datetime import date

import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from debt_tracker import config
from debt_tracker.advisor import get_advice
from debt_tracker.analytics import (
    ALL,
    credit_card_breakdown,
    credit_card_trend,
    credit_cards,
    current_balance,
    debt_reduced,
    liability_trend,
    other_liabilities,
    ranked_avalanche,
    total_credit_card_debt,
    total_liabilities,
)
from debt_tracker.domain import ACCOUNT_TYPES
from debt_tracker.functional import parse_account_form, parse_balance_form
from debt_tracker.state import AppState
from debt_tracker.storage import JsonFileStore

st.set_page_config(page_title="Debt Tracker", layout="wide")

if "app_state" not in st.session_state:
    config.configure_logging()
    st.session_state.app_state = AppState.load(JsonFileStore(config.store_path()))

state: AppState = st.session_state.app_state


def money(value: float) -> str:
    return f"${value:,.2f}".replace(".00", "")


def series_df(points) -> pd.DataFrame:
    df = pd.DataFrame(points, columns=["date", "amount"])
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


def delete_control(account) -> None:
    with st.popover("🗑 Delete"):
        st.caption(f"Delete **{account.name}** and its whole history? This cannot be undone.")
        sure = st.checkbox("I'm sure", key=f"confirm_del_{account.id}")
        if st.button("Delete account", key=f"btn_del_{account.id}", disabled=not sure):
            state.delete_account(account.id)
            st.rerun()


menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "➕ Add Account", "✏️ Update Balance", "🤖 AI Advisor", "⚙️ Settings"]
)

if menu == "🏠 Dashboard":
    st.title("📉 Debt Tracker")
    accounts = state.accounts
    cards = credit_cards(accounts)

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Total Liabilities", money(total_liabilities(accounts)))
        st.caption("No active accounts" if not accounts else "All accounts combined")
    with k2:
        st.metric("Credit Card Debt", money(total_credit_card_debt(accounts)))
        st.caption(f"{len(cards)} active cards")
    with k3:
        st.metric("Debt Reduced", money(debt_reduced(accounts)))
        st.caption("Since tracking began")

    if not accounts:
        st.info("No accounts yet. Add one from the sidebar to start tracking.")
    else:
        st.subheader("💳 Credit Card Debt Over Time")
        cc_df = series_df(credit_card_trend(accounts))
        if cc_df.empty:
            st.info("No credit cards to chart")
        else:
            fig_cc = px.area(cc_df, x="date", y="amount", labels={"amount": "Balance ($)", "date": "Date"}, template="plotly_dark")
            st.plotly_chart(fig_cc, use_container_width=True)

        st.subheader("📊 Individual Cards")
        breakdown = credit_card_breakdown(accounts)
        if breakdown:
            dates = pd.to_datetime([d for d, _ in breakdown])
            fig_cards = go.Figure()
            for card in cards:
                # missing dates stay None so the line breaks instead of dropping to zero
                fig_cards.add_trace(go.Scatter(
                    x=dates,
                    y=[row.get(card.id) for _, row in breakdown],
                    mode="lines+markers",
                    name=card.name,
                    connectgaps=False,
                ))
            fig_cards.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
            st.plotly_chart(fig_cards, use_container_width=True)

        st.subheader("📈 Liability Trend")
        names = {a.id: a.name for a in accounts}
        selection = st.selectbox(
            "Show",
            options=[ALL] + list(names),
            format_func=lambda i: "All liabilities" if i == ALL else names[i],
            key="trend_selection",
        )
        trend_df = series_df(liability_trend(accounts, selection))
        if not trend_df.empty:
            fig_trend = px.line(trend_df, x="date", y="amount", markers=True, labels={"amount": "Balance ($)", "date": "Date"}, template="plotly_dark")
            st.plotly_chart(fig_trend, use_container_width=True)

    col_cards, col_other = st.columns(2)
    with col_cards:
        st.subheader("🔥 Payoff Priority (Avalanche)")
        ranked = list(ranked_avalanche(accounts))
        if not ranked:
            st.info("No credit cards tracked")
        for rank, card in ranked:
            with st.container(border=True):
                left, right = st.columns([3, 1])
                with left:
                    title = f"#{rank} {card.name}"
                    if rank == 1:
                        st.markdown(f"### 🎯 {title}")
                        st.caption("Pay this one first")
                    else:
                        st.markdown(f"**{title}**")
                    st.caption(f"{card.interest_rate:g}% APR")
                with right:
                    st.metric("Balance", money(current_balance(card)), label_visibility="collapsed")
                    delete_control(card)

    with col_other:
        st.subheader("🏠 Other Liabilities")
        others = other_liabilities(accounts)
        if not others:
            st.info("No other liabilities tracked")
        for acc in others:
            with st.container(border=True):
                left, right = st.columns([3, 1])
                with left:
                    st.markdown(f"**{acc.name}**")
                    st.caption(f"{acc.type_label.title()} • {acc.interest_rate:g}% APR")
                with right:
                    st.metric("Balance", money(current_balance(acc)), label_visibility="collapsed")
                    delete_control(acc)

elif menu == "➕ Add Account":
    st.title("➕ Add Account")
    with st.form("add_account_form"):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Account name", placeholder="e.g. Chase Sapphire")
            acc_type = st.selectbox("Type", ACCOUNT_TYPES, format_func=lambda t: t.replace("_", " ").title())
        with col2:
            rate = st.text_input("Interest rate (APR %)", placeholder="24.99")
            balance = st.text_input("Current balance ($)", placeholder="5000")
        submitted = st.form_submit_button("Add Account")

    if submitted:
        parsed = parse_account_form(name, acc_type, rate, balance, date.today())
        if parsed.is_left():
            st.warning(parsed.get_error()["message"])
        else:
            account = state.create_account(name, acc_type, rate, balance, date.today())
            st.success(f"✅ Added {account.name}")

elif menu == "✏️ Update Balance":
    st.title("✏️ Update Balance")
    accounts = state.accounts
    if not accounts:
        st.info("Add an account first.")
    else:
        names = {a.id: a.name for a in accounts}
        with st.form("update_balance_form", clear_on_submit=True):
            account_id = st.selectbox("Account", list(names), format_func=lambda i: names[i])
            on = st.date_input("Date", value=date.today())
            balance = st.text_input("New balance ($)")
            submitted = st.form_submit_button("Save Balance")

        if submitted:
            parsed = parse_balance_form(account_id, balance, on)
            if parsed.is_left():
                st.warning(parsed.get_error()["message"])
            elif state.record_balance(account_id, balance, on):
                st.success(f"✅ Recorded {money(float(parsed.get_or_else({})['balance']))} for {names[account_id]} on {on}")

        history = [
            {"Account": a.name, "Date": e.date, "Balance": e.balance}
            for a in state.accounts for e in a.history
        ]
        st.subheader("📋 Balance History")
        st.dataframe(pd.DataFrame(history), use_container_width=True)

elif menu == "🤖 AI Advisor":
    st.title("🤖 AI Debt Advisor")
    st.caption("Sends each account's name, type, rate and current balance to Google Gemini.")
    if st.button("Analyze my debt", disabled=not state.accounts):
        snapshot = state.accounts
        with st.spinner("Analyzing..."):
            st.session_state.advice = asyncio.run(get_advice(snapshot, state.api_key))
    if st.session_state.get("advice"):
        st.markdown(st.session_state.advice)
        if st.button("Close Analysis", key="btn_close_analysis"):
            st.session_state.pop("advice", None)
            st.rerun()

elif menu == "⚙️ Settings":
    st.title("⚙️ Settings")

    with st.form("settings_form"):
        key_input = st.text_input("Gemini API Key", value=state.api_key or "", type="password")
        saved = st.form_submit_button("Save Key")
    if saved:
        state.set_credential(key_input)
        st.success("API key saved" if key_input.strip() else "API key removed")

    st.divider()
    st.subheader("⚠️ Danger Zone")
    st.caption("Deletes every account and its history. The API key is kept.")
    confirm_reset = st.checkbox("I understand this cannot be undone", key="confirm_reset")
    if st.button("Clear all data", disabled=not confirm_reset):
        state.reset_all()
        st.session_state.pop("advice", None)
        st.success("All data cleared")
