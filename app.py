"""
Stargazer Dashboard: thin orchestrator

    streamlit run app.py
"""

from __future__ import annotations

import streamlit as st

st.set_page_config(
    page_title="Stargazer Dashboard · ghstats",
    page_icon="⭐",
    layout="wide",
    initial_sidebar_state="expanded",
)

from ghstats.data import load_stars_report, merge_selected
from ghstats.sections.growth import render_growth
from ghstats.sections.sidebar import render_filters, render_sidebar
from ghstats.sections.summary import render_summary


def main() -> None:
    path = render_sidebar()
    report = load_stars_report(path)

    names, log_scale = render_filters(report)
    merged = merge_selected(report, names)

    st.title("⭐ Stargazer Dashboard")
    st.caption(
        f"Cumulative stars through the week of {report.get('reference_week', '?')} · "
        f"{len(names)} repositories · {len(merged.weeks)} weeks"
    )

    render_growth(merged, log_scale)
    render_summary(merged, report.get("failures", {}))


if __name__ == "__main__":
    main()
