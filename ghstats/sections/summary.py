"""Summary table with totals and date ranges per repository."""

from __future__ import annotations

import streamlit as st

from ghstats.data import build_summary_df
from ghstats.stars import MergedSeries


def render_summary(merged: MergedSeries, failures: dict[str, str]) -> None:
    st.markdown("---")
    st.markdown("## 📊 Summary")

    display = build_summary_df(merged)
    display.index = range(1, len(display) + 1)
    display.columns = ["Repository", "Stars ⭐", "Weeks with stars", "First week", "Last week"]

    st.dataframe(
        display.style.format({"Stars ⭐": "{:,}"}),
        use_container_width=True,
    )

    if failures:
        st.markdown("### ⚠️ Failed Repositories")
        for name, reason in failures.items():
            st.markdown(f"- **{name}**: {reason}")

    st.markdown("---")
    st.caption("Data: GitHub GraphQL API · generated by `ghstats stars`")
