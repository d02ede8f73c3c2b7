import streamlit as st

from core import apply_theme_css, get_dataset, get_filter_manager, get_theme, setup_logging, show_home

# This MUST be the first Streamlit command in the whole app
st.set_page_config(
    page_title="Healthcare Analytics Dashboard",
    page_icon="🏥",
    layout="wide",
)

setup_logging()
theme = get_theme(False)
apply_theme_css(theme)

st.title("Healthcare Analytics Dashboard")
st.write(
    "Use the navigation in the left sidebar to open **Overview**, **Demographics**, "
    "**Financial**, **Geographic**, **Data Explorer** and **About** pages."
)

dataset = get_dataset()
manager = get_filter_manager()
show_home(theme, dataset, manager)
