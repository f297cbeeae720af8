"""Cumulative growth chart and per-repository weekly increments."""

from __future__ import annotations

import streamlit as st

from ghstats.charts import make_star_growth, make_weekly_new_stars
from ghstats.data import weekly_new_stars
from ghstats.stars import MergedSeries


def render_growth(merged: MergedSeries, log_scale: bool) -> None:
    st.markdown("## 📈 Stargazer Growth")
    if not merged.weeks:
        st.info("No stars recorded for the selected repositories.")
        return

    st.plotly_chart(
        make_star_growth(merged.table, log_scale=log_scale),
        use_container_width=True,
        key="growth",
    )

    st.markdown("### New Stars per Week")
    weekly = weekly_new_stars(merged)
    repo = st.selectbox("Repository:", list(weekly.columns), index=0, key="weekly_repo")
    st.plotly_chart(
        make_weekly_new_stars(weekly, repo),
        use_container_width=True,
        key="weekly",
    )
