"""
Repricing Dashboard

A Streamlit front end for the Heureka repricer: upload both exports, pick a
strategy, review the new prices and download the result workbook.
Run with: streamlit run app.py
"""

import sys
import tempfile
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from feeds import CatalogLoadError, HeurekaCatalogLoader
from repricer import RepricingEngine, RepricingSettings, get_strategy, results_to_frame, results_to_xlsx_bytes
from repricer.strategies import STRATEGY_NAMES

# Page config
st.set_page_config(
    page_title="Heureka Repricer",
    page_icon="🏷️",
    layout="wide",
)

st.title("🏷️ Heureka Repricer")
st.caption("New sell prices for warehouse stock, checked against the Heureka price ladder")

settings = RepricingSettings()

STRATEGY_LABELS = {
    "rules": "Rule discount + competitor floor",
    "second_rung": "Second cheapest competitor price",
}


@st.cache_data
def run_repricing(listings_name: str, listings_bytes: bytes, stock_name: str, stock_bytes: bytes, strategy_name: str):
    """Load both uploads and reprice (cached per upload + strategy)."""
    with tempfile.TemporaryDirectory() as tmp:
        tmp_dir = Path(tmp)
        listings_path = tmp_dir / f"listings{Path(listings_name).suffix}"
        stock_path = tmp_dir / f"stock{Path(stock_name).suffix}"
        listings_path.write_bytes(listings_bytes)
        stock_path.write_bytes(stock_bytes)

        catalogs = HeurekaCatalogLoader(settings).load_all(listings_path, stock_path)

    engine = RepricingEngine(catalogs.listings, get_strategy(strategy_name, settings), settings)
    return catalogs, engine.run(catalogs.stock)


# --- Sidebar inputs ---
st.sidebar.header("1. Upload Exports")
listings_file = st.sidebar.file_uploader("Heureka export", type=["xlsx", "xls"])
stock_file = st.sidebar.file_uploader("Warehouse (sklad) export", type=["xlsx", "xls"])

st.sidebar.header("2. Strategy")
strategy_name = st.sidebar.radio(
    "Repricing strategy",
    STRATEGY_NAMES,
    format_func=lambda name: STRATEGY_LABELS.get(name, name),
)

if listings_file is None or stock_file is None:
    st.info("Upload both exports in the sidebar to start.")
    st.stop()

try:
    with st.spinner("Matching and repricing..."):
        catalogs, run = run_repricing(
            listings_file.name,
            listings_file.getvalue(),
            stock_file.name,
            stock_file.getvalue(),
            strategy_name,
        )
except CatalogLoadError as exc:
    st.error(f"Could not read a workbook: {exc}")
    st.stop()

critical_count = sum(len(report.critical_issues) for report in catalogs.quality_reports.values())
if critical_count:
    st.warning(f"{critical_count} critical data quality issue(s); see the quality reports at the bottom")

# --- Key Metrics Row ---
st.header("Key Metrics")
col1, col2, col3, col4 = st.columns(4)

with col1:
    st.metric("Listings", f"{len(catalogs.listings):,}", delta=f"{len(catalogs.stock):,} stock rows")

with col2:
    st.metric("Repriced", f"{len(run.results):,}", delta=f"{run.match_rate:.1%} matched")

with col3:
    st.metric(
        "Unmatched",
        f"{run.unmatched_count:,}",
        delta="skipped",
        delta_color="inverse",
    )

with col4:
    st.metric(
        "Lifted to Floor",
        f"{run.floor_adjusted_count:,}",
        delta="cheapest competitor + 1",
        delta_color="off",
    )

st.divider()

results_df = results_to_frame(run.results)

left_col, right_col = st.columns([2, 1])

with left_col:
    st.subheader("💰 New Prices")

    if len(results_df) > 0:
        st.dataframe(
            results_df,
            use_container_width=True,
            hide_index=True,
            column_config={
                "NewSellPriceWithTax": st.column_config.NumberColumn(format="%.2f"),
                "NewSellPriceExTax": st.column_config.NumberColumn(format="%.2f"),
                "Discount": st.column_config.NumberColumn(format="%.2f %%"),
                "LowestLadderPriceWithTax": st.column_config.NumberColumn(format="%.2f"),
                "Link": st.column_config.LinkColumn(),
            },
        )
    else:
        st.info("No stock rows could be repriced")

    st.download_button(
        "Download result workbook",
        data=results_to_xlsx_bytes(run.results, placeholder=settings.empty_result_placeholder),
        file_name=settings.default_output_path,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

with right_col:
    st.subheader("📊 Ladder Position")

    if len(results_df) > 0:
        rank_counts = results_df["LadderRank"].value_counts().sort_index()
        fig_rank = go.Figure(
            data=[
                go.Bar(
                    x=[str(rank) for rank in rank_counts.index],
                    y=rank_counts.values,
                    marker_color="#3498db",
                )
            ]
        )
        fig_rank.update_layout(
            title="Items per Ladder Rank",
            height=300,
            margin=dict(t=40, b=20, l=20, r=20),
            xaxis_title="Rank (1 = cheapest)",
        )
        st.plotly_chart(fig_rank, use_container_width=True)

        by_rule = results_df.groupby("RuleCode")["Discount"].mean().sort_index()
        fig_rule = go.Figure(
            data=[
                go.Bar(
                    x=by_rule.index.astype(str),
                    y=by_rule.values,
                    marker_color="#2ecc71",
                    text=[f"{v:.1f}%" for v in by_rule.values],
                    textposition="outside",
                )
            ]
        )
        fig_rule.update_layout(
            title="Avg Discount by Rule",
            height=250,
            margin=dict(t=40, b=20, l=20, r=20),
            yaxis_title="%",
        )
        st.plotly_chart(fig_rule, use_container_width=True)

st.divider()

# --- Skipped rows ---
st.subheader("⚠️ Skipped Stock Rows")

if run.skipped:
    skipped_df = pd.DataFrame(
        [
            {"Row": s.row_number, "Code": s.code, "EAN": s.ean, "Reason": s.reason}
            for s in run.skipped
        ]
    )
    st.dataframe(skipped_df, use_container_width=True, hide_index=True)
else:
    st.markdown("✅ Every stock row was matched")

# --- Data Quality Section ---
with st.expander("📋 View Data Quality Reports"):
    quality_col1, quality_col2 = st.columns(2)

    for column, key, title in (
        (quality_col1, "listings", "**Heureka export**"),
        (quality_col2, "stock", "**Warehouse export**"),
    ):
        with column:
            st.markdown(title)
            report = catalogs.quality_reports[key]
            if report.issues:
                for issue in report.issues:
                    icon = "🔴" if issue.severity == "critical" else "🟡" if issue.severity == "warning" else "🔵"
                    st.markdown(f"{icon} {issue.column}: {issue.description}")
            else:
                st.markdown("✅ No issues found")

# --- Footer ---
st.divider()
st.caption(
    f"Strategy: {STRATEGY_LABELS.get(run.strategy, run.strategy)} | "
    f"Listings: {len(catalogs.listings):,} | Stock: {len(catalogs.stock):,} | "
    f"Repriced: {len(run.results):,}"
)
