"""Sidebar controls: report path and repository filters."""

from __future__ import annotations

import streamlit as st


def render_sidebar(default_path: str = "out/stargazers.json") -> str:
    """Return the path of the stargazer report to load."""
    with st.sidebar:
        st.markdown("## ⚙️ Controls")
        path = st.text_input("Stargazer report", value=default_path, key="report_path")
    return path


def render_filters(report: dict) -> tuple[list[str], bool]:
    """
    Render the filters that depend on the loaded report and return:
        names      - selected repositories, in report order
        log_scale  - bool toggle
    """
    all_names = list(dict.fromkeys(r["name"] for r in report.get("repositories", [])))
    with st.sidebar:
        st.markdown("### Repositories")
        chosen = st.multiselect("Show", all_names, default=all_names, key="repos")
        log_scale = st.toggle("Log scale", value=False)

        st.markdown("---")
        st.info(
            f"**Through week of**: {report.get('reference_week', '?')}  \n"
            f"**Repositories**: {len(all_names)}  \n"
            f"**Failed**: {len(report.get('failures', {}))}"
        )
    return [n for n in all_names if n in chosen], log_scale
