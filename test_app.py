from streamlit.testing.v1 import AppTest


def run_app():
    at = AppTest.from_file("app.py", default_timeout=30)
    at.run()
    return at


def test_app_starts_empty():
    at = run_app()

    assert not at.exception
    assert "Enter your schedule above" in at.info[0].value
    title = next(md.value for md in at.markdown if "Class Schedule" in md.value)
    assert "#1F4E79" in title


def test_app_previews_schedule():
    at = run_app()
    at.text_area[0].input("TR 11am-12:15pm | Intro to Programming\nM 8am-9:40am").run()

    assert not at.exception
    assert at.success[0].value == "✅ Found 2 weekly meetings!"
    assert len(at.dataframe[0].value) == 2
    assert "RRULE:FREQ=WEEKLY;BYDAY=TU,TH;UNTIL=20250610T235959Z" in at.code[0].value
    assert '"frequency": "WEEKLY"' in at.code[1].value


def test_app_warns_on_bad_lines():
    at = run_app()
    at.text_area[0].input("MWF sometime").run()

    assert not at.exception
    assert "times not found" in at.warning[0].value
    assert "No valid schedule lines" in at.error[0].value
