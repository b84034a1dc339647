"""Streamlit pages rendered by the main entry point."""
