"""Session, upload and error handlers shared by the Streamlit pages."""
