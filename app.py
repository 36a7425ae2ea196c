import json
from datetime import datetime, time, timezone

import streamlit as st
import pandas as pd

import config
from helpers import (
    ParseError, format_datetime_5545, generate_ics, parse_instant,
    parse_recurrence_string, parse_schedule, parse_to_5545, parse_to_8984,
)

# ---------- PAGE CONFIG ----------
st.set_page_config(page_title="Class Schedule to Calendar", layout="wide")

# ---------- TITLE ----------
st.markdown("<h1 style='text-align: center; color: #1F4E79;'>📅 Class Schedule → iCalendar (.ics)</h1>", unsafe_allow_html=True)

# ---------- INSTRUCTIONS ----------
st.markdown("""
### 🎓 How to Use
1️⃣ Pick the first and last day of the term in the sidebar.
2️⃣ Enter one meeting pattern per line, e.g. `TR 11am-12:15pm | Intro to Programming`.
3️⃣ Day letters: **M** T **W** R **F** S U (R = Thursday, U = Sunday).
4️⃣ Scroll down to preview and download your `.ics` calendar file.
""")

st.divider()

# ---------- USER SETTINGS ----------
default_start = parse_instant(config.PERIOD_START)
default_end = parse_instant(config.PERIOD_END)

start_day = st.sidebar.date_input("Term starts", value=default_start.date())
end_day = st.sidebar.date_input("Term ends", value=default_end.date())

period_start = datetime.combine(start_day, time(0, 0), tzinfo=timezone.utc)
period_end = datetime.combine(end_day, time(23, 59, 59), tzinfo=timezone.utc)

# ---------- STREAMLIT APP ----------
st.markdown("### 📋 Enter Your Schedule OR Upload a File")

pasted_text = st.text_area("📌 Schedule lines", height=200)
uploaded_file = st.file_uploader("📂 Or upload a schedule (.txt)", type=["txt"])

schedule_text = pasted_text.strip() if pasted_text.strip() else (
    uploaded_file.read().decode("utf-8") if uploaded_file else ""
)

if schedule_text:
    entries = parse_schedule(schedule_text)
    rows = []
    for title, recurrence in entries:
        try:
            pattern = parse_recurrence_string(recurrence)
            rows.append({
                "Title": title,
                "Recurrence": recurrence,
                "Days": ",".join(pattern.days),
                "Start": f"{pattern.start_time.hours:02d}:{pattern.start_time.minutes:02d}",
                "End": f"{pattern.end_time.hours:02d}:{pattern.end_time.minutes:02d}",
            })
        except ParseError as e:
            st.warning(f"⚠️ Skipping `{recurrence}`: {str(e)}")

    if rows:
        st.success(f"✅ Found {len(rows)} weekly meetings!")
        st.dataframe(pd.DataFrame(rows, columns=["Title", "Recurrence", "Days", "Start", "End"]))

        first_title, first_recurrence = rows[0]["Title"], rows[0]["Recurrence"]
        st.markdown(f"""
        ### 📅 First Meeting Preview
        **Title:** {first_title}
        **Repeats until:** {format_datetime_5545(period_end)}
        """)
        col_5545, col_8984 = st.columns(2)
        col_5545.code(parse_to_5545(period_start, period_end, first_recurrence), language="text")
        col_8984.code(json.dumps(parse_to_8984(period_start, period_end, first_recurrence), indent=2), language="json")

        try:
            filename, cal = generate_ics(period_start, period_end, entries)
            ics_data = cal.serialize().encode("utf-8")
        except Exception as e:
            st.error(f"❌ Error generating ICS file: {str(e)}")
            filename, ics_data = None, None

        if ics_data:
            st.download_button(
                label="📥 Download ICS File",
                data=ics_data,
                file_name=filename,
                mime="text/calendar",
                type="primary"
            )
    else:
        st.error("❌ No valid schedule lines found. Please check your input.")
else:
    st.info("⬆️ Enter your schedule above or upload a `.txt` file to continue.")
