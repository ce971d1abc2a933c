"""Streamlit dashboard for traffic capacity and housing allocation."""
