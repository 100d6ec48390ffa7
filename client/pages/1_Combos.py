# client/pages/1_🍔_Combos.py
import streamlit as st
import api as API
from components import count_up, show_json, show_table

st.title("🍔 Combos")

tab1, tab2 = st.tabs(["Browse", "Repair"])

with tab1:
    st.subheader("Combos")
    try:
        rests = API.restaurants()
    except Exception as e:
        rests = []
        st.error(e)
    names = {"": "All restaurants", **{r["restaurant_id"]: r["name"] for r in rests}}
    c1, c2, c3 = st.columns(3)
    with c1:
        rid = st.selectbox("restaurant", list(names), format_func=names.get, key="combo_rest")
    with c2:
        category = st.selectbox("category", ["all", "family", "couple", "individual", "group", "special"], key="combo_cat")
    with c3:
        limit = st.number_input("limit", 1, 200, 20, key="combo_limit")
    if st.button("Fetch combos", key="btn_fetch_combos"):
        params = {"limit": int(limit), "category": category}
        if rid: params["restaurantId"] = rid
        try:
            rows = API.combos(**params)
            count_up("Combos found", len(rows), key="combos_found")
            show_table(rows)
        except Exception as e:
            st.error(e)

with tab2:
    st.subheader("Repair restaurant references")
    st.caption("Rewrites combos whose restaurant was saved as a whole document. Safe to run repeatedly.")
    batch = st.number_input("batch size", 1, 10000, 500, key="repair_batch")
    if st.button("Run repair", key="btn_repair"):
        try:
            rep = API.repair_combos(batch_size=int(batch))
            c1, c2, c3 = st.columns(3)
            with c1:
                count_up("Processed", rep["processed"], key="rep_processed")
            with c2:
                count_up("Corrected", rep["corrected"], key="rep_corrected")
            with c3:
                count_up("Issues", len(rep["anomalies"]) + len(rep["read_failures"]) + len(rep["write_failures"]) + len(rep["mismatches"]), key="rep_issues")
            if rep["verified"]:
                st.success("All combos reference their restaurant by id.")
            else:
                st.warning("Some combos still need manual attention.")
            show_json(rep)
        except Exception as e:
            st.error(e)
