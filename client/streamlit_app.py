# client/streamlit_app.py
import os
import requests
import streamlit as st

import api as API
from components import count_up

st.set_page_config(page_title="Food Delivery Dashboard", layout="wide")
st.title("🍱 Food Delivery Dashboard")

st.markdown("""
This is the home page.

Use the **sidebar Pages** to open:
- **🍔 Combos** — Browse combos per restaurant and run the restaurant-reference repair.
""")

with st.sidebar:
    st.header("Settings")
    api_url = os.getenv("API_BASE_URL", "http://localhost:8000")
    st.text_input("API Base URL (from env)", value=api_url, disabled=True)
    if st.button("Health check"):
        try:
            r = requests.get(f"{api_url}/healthz", timeout=5)
            st.success(r.json())
        except Exception as e:
            st.error(f"Health check failed: {e}")

try:
    rests = API.restaurants()
    featured = API.combos(isFeatured="true", limit=200)
    c1, c2 = st.columns(2)
    with c1:
        count_up("Restaurants", len(rests), key="home_restaurants")
    with c2:
        count_up("Featured combos", len(featured), key="home_featured")
except Exception as e:
    st.error(f"Could not load dashboard counters: {e}")

st.info("Tip: set `API_BASE_URL` and `API_TOKEN` in `client/.env` or export them before running `streamlit run client/streamlit_app.py`.")
