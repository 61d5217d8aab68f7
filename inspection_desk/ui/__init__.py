"""Streamlit surfaces; import ``inspection_desk.ui.dashboard`` explicitly."""
