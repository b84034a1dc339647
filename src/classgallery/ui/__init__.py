"""User interface package: Streamlit pages, components and handlers."""
