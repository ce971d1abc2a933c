"""Streamlit dashboard for traffic capacity and housing allocation."""

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

try:
    from housing_capacity.config import ConfigManager
    from housing_capacity.reports import build_capacity_report, summarize_report
    from housing_capacity.services import CapacityService
    from housing_capacity.utils import setup_logging
except ImportError as e:
    st.error(f"Import error: {e}")
    st.error("Please install the housing_capacity package")
    st.stop()

# Page configuration
st.set_page_config(
    page_title="Traffic Capacity",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def _load_service(config_file: str):
    config_manager = ConfigManager(config_file)
    config = config_manager.get_system_config()
    # The page reruns on every interaction; keep records on disk
    if config.storage_backend == "memory":
        config_manager.update_system_config(storage_backend="json")
    setup_logging(log_level=config.log_level, log_file=config.log_file_path)
    return CapacityService.from_config(config), config


def build_capacity_chart(report: pd.DataFrame, threshold: float) -> go.Figure:
    """Stacked bar of allocated and remaining residents per traffic record.
    
    Allocated bars are red when over the limit, amber at or above threshold
    utilization and green otherwise.
    """
    colors = [
        '#f44336' if row.over_allocated else '#ff9800' if row.utilization >= threshold else '#4caf50'
        for row in report.itertuples()
    ]
    
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=report['road_name'],
        y=report['total_residents'],
        name='Allocated',
        marker_color=colors
    ))
    fig.add_trace(go.Bar(
        x=report['road_name'],
        y=report['remaining_limit'],
        name='Remaining',
        marker_color='#b0bec5'
    ))
    fig.update_layout(barmode='stack', title="Residents per Traffic", yaxis_title="Residents", height=400)
    return fig


class SimpleCapacityDashboard:
    """Operator view for creating traffic and housing records."""
    
    def __init__(self, config_file: str = "config/system_config.json"):
        try:
            self.service, self.config = _load_service(config_file)
        except Exception as e:
            st.error(f"Failed to initialize dashboard: {e}")
            st.stop()
    
    def run(self):
        """Run the main dashboard application."""
        self._render_sidebar()
        
        st.title("Traffic Capacity")
        report = build_capacity_report(self.service.traffic_store, self.service.housing_store)
        self._render_summary(report)
        
        tab_report, tab_traffic, tab_housing = st.tabs(["Capacity", "Traffic", "Housing"])
        with tab_report:
            self._render_capacity(report)
        with tab_traffic:
            self._render_traffic_forms(report)
        with tab_housing:
            self._render_housing_form(report)
    
    def _render_sidebar(self):
        st.sidebar.title("Capacity Control")
        st.sidebar.write(f"**Storage:** {self.config.storage_backend} ({self.config.data_dir})")
        st.sidebar.write(f"**Strict traffic references:** {self.config.strict_traffic_reference}")
        
        if st.sidebar.button("Refresh Now"):
            st.rerun()
    
    def _render_summary(self, report: pd.DataFrame):
        summary = summarize_report(report)
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Traffic Records", summary['traffic_count'])
        col2.metric("Total Limit", summary['total_limit'])
        col3.metric("Residents Allocated", summary['total_residents'])
        col4.metric("Utilization", f"{summary['overall_utilization']:.0%}")
        
        if summary['over_allocated_count']:
            st.warning(f"{summary['over_allocated_count']} traffic record(s) are over their limit after an edit")
    
    def _render_capacity(self, report: pd.DataFrame):
        if report.empty:
            st.info("No traffic records yet. Create one in the Traffic tab.")
            return
        
        fig = build_capacity_chart(report, self.config.high_utilization_threshold)
        st.plotly_chart(fig, use_container_width=True)
        
        st.dataframe(report, use_container_width=True, hide_index=True)
    
    def _render_traffic_forms(self, report: pd.DataFrame):
        st.subheader("Create Traffic")
        with st.form("create_traffic"):
            road_name = st.text_input("Road name")
            limit = st.number_input("Limit", min_value=1, value=10, step=1)
            if st.form_submit_button("Create"):
                result = self.service.create_traffic({'road_name': road_name, 'limit': int(limit)})
                if result.ok:
                    st.success(f"Created traffic {result.value}")
                else:
                    st.error(result.error_message)
        
        if report.empty:
            return
        
        st.subheader("Edit Traffic Limit")
        names = dict(zip(report['traffic_id'], report['road_name']))
        with st.form("edit_traffic"):
            traffic_id = st.selectbox("Traffic", options=list(names), format_func=lambda x: names[x])
            new_name = st.text_input("Road name", value="")
            new_limit = st.number_input("New limit", min_value=1, value=10, step=1)
            if st.form_submit_button("Save"):
                result = self.service.edit_traffic_limit(
                    traffic_id, {'road_name': new_name or names[traffic_id], 'limit': int(new_limit)}
                )
                if result.ok:
                    st.success(f"Updated {result.value.road_name} to limit {result.value.traffic_limit}")
                else:
                    st.error(result.error_message)
    
    def _render_housing_form(self, report: pd.DataFrame):
        if report.empty:
            st.info("Create a traffic record before allocating housing.")
            return
        
        names = dict(zip(report['traffic_id'], report['road_name']))
        st.subheader("Create Housing")
        with st.form("create_housing"):
            traffic_id = st.selectbox(
                "Traffic",
                options=list(names),
                format_func=lambda x: f"{names[x]} ({self.service.get_traffic_remaining_limit(x)} left)"
            )
            housing_name = st.text_input("Housing name")
            residents = st.number_input("Residents", min_value=1, value=1, step=1)
            if st.form_submit_button("Allocate"):
                result = self.service.create_housing({
                    'housing_name': housing_name,
                    'number_of_residents': int(residents),
                    'traffic_id': traffic_id,
                })
                if result.ok:
                    st.success(f"{result.value.msg} Remaining before allocation: {result.value.remaining_limit}")
                else:
                    st.error(result.error_message)
        
        housings = self.service.list_housing()
        if housings:
            st.subheader("Housing Records")
            st.dataframe(
                pd.DataFrame([h.to_dict() for h in housings]),
                use_container_width=True,
                hide_index=True
            )


def main():
    """Entry point used by streamlit run."""
    dashboard = SimpleCapacityDashboard()
    dashboard.run()


if __name__ == "__main__":
    main()
