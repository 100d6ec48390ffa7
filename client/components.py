# client/components.py
import time
import streamlit as st
import pandas as pd

from fooddelivery.animation import CountUp, ManualFrameScheduler, format_grouped

def show_table(rows, caption: str | None = None):
    """Render a list[dict] as a dataframe; otherwise show JSON."""
    if caption:
        st.caption(caption)
    if isinstance(rows, list):
        if rows and isinstance(rows[0], dict):
            st.dataframe(pd.DataFrame(rows))
        else:
            st.write(rows)
    else:
        st.write(rows)

def show_json(obj, caption: str | None = None):
    if caption:
        st.caption(caption)
    st.json(obj)

def count_up(label: str, value, key: str, duration_ms: int = 800, formatter=format_grouped):
    """
    Animated metric. Counts from the value shown on the previous rerun
    (kept in session_state under `key`) to `value`, drawing into one placeholder.
    """
    placeholder = st.empty()
    sched = ManualFrameScheduler()
    start = st.session_state.get(key, 0)
    render = lambda v, text: placeholder.metric(label, text)
    with CountUp(sched, duration_ms=duration_ms, formatter=formatter,
                 on_render=render, initial=start) as counter:
        placeholder.metric(label, counter.text)
        counter.set_value(value)
        sched.run_until_idle(sleep=time.sleep)
        st.session_state[key] = counter.display
