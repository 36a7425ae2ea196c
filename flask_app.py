from flask import Flask, render_template, request, send_file, jsonify, Response
import io

import config
from helpers import ParseError, generate_ics, parse_instant, parse_schedule, parse_to_5545, parse_to_8984

app = Flask(__name__)


def read_period():
    """Period bounds from the form, falling back to the configured defaults."""
    period_start = parse_instant(request.form.get('period_start', '').strip() or config.PERIOD_START)
    period_end = parse_instant(request.form.get('period_end', '').strip() or config.PERIOD_END)
    return period_start, period_end


@app.route('/')
def index():
    return render_template('index.html', period_start=config.PERIOD_START, period_end=config.PERIOD_END)


@app.route('/convert', methods=['POST'])
def convert_recurrence():
    try:
        recurrence = request.form.get('recurrence', '').strip()
        output_format = request.form.get('format', '5545').strip()

        if not recurrence:
            return jsonify({'error': 'Please provide a recurrence string'}), 400
        if output_format not in ('5545', '8984'):
            return jsonify({'error': f'Unsupported format: {output_format}'}), 400

        period_start, period_end = read_period()

        if output_format == '8984':
            return jsonify(parse_to_8984(period_start, period_end, recurrence))

        vevent = parse_to_5545(period_start, period_end, recurrence)
        return Response(vevent, mimetype='text/calendar')

    except ParseError as e:
        return jsonify({'error': str(e)}), 400
    except ValueError as e:
        return jsonify({'error': f'Invalid period: {str(e)}'}), 400
    except Exception as e:
        app.logger.exception("Conversion failed")
        return jsonify({'error': f'Error converting recurrence: {str(e)}'}), 500


@app.route('/calendar', methods=['POST'])
def download_calendar():
    try:
        schedule_text = request.form.get('schedule_text', '').strip()

        if not schedule_text:
            return jsonify({'error': 'Please provide schedule text'}), 400

        try:
            period_start, period_end = read_period()
        except ValueError as e:
            return jsonify({'error': f'Invalid period: {str(e)}'}), 400

        entries = parse_schedule(schedule_text)

        filename, calendar = generate_ics(period_start, period_end, entries)
        if not calendar.events:
            return jsonify({'error': 'No valid schedule lines found. Please check your input.'}), 400

        ics_file = io.BytesIO(calendar.serialize().encode('utf-8'))
        ics_file.seek(0)

        return send_file(
            ics_file,
            as_attachment=True,
            download_name=filename,
            mimetype='text/calendar'
        )

    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        app.logger.exception("Calendar export failed")
        return jsonify({'error': f'Error processing schedule: {str(e)}'}), 500


if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=config.PORT)
