import io
import sys
import time
import uuid
from pathlib import Path

from flask import Flask, jsonify, request, send_file
from werkzeug.utils import secure_filename

# Add src to path so we can import dataclysm without installing it
webapp_dir = Path(__file__).parent
src_dir = webapp_dir.parent / "src"
sys.path.insert(0, str(src_dir))

from dataclysm.config import EXPORT_FILENAME
from dataclysm.pipeline.collaborators import SessionConfig
from dataclysm.pipeline.session import CleaningSession
from dataclysm.profiling.charts import AGGREGATIONS

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 50 * 1024 * 1024  # 50MB max upload
app.config['SECRET_KEY'] = 'change-me'
# Optional replacement for the Gemini call, used by tests
app.config['LLM_CALL'] = None
# Oldest sessions are dropped once this many are held in memory
app.config['MAX_SESSIONS'] = 100

# Global state for session tracking
sessions = {}

ALLOWED_EXTENSIONS = {'csv', 'txt'}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def store_session(session_id, session):
    limit = app.config.get('MAX_SESSIONS') or 0
    while limit and len(sessions) >= limit:
        sessions.pop(next(iter(sessions)))
    sessions[session_id] = session


def get_session(session_id):
    return sessions.get(session_id)


def session_payload(session_id, session, include_rows=True):
    payload = session.to_dict(include_rows=include_rows)
    payload['sessionId'] = session_id
    return payload


@app.route('/')
def index():
    return jsonify({
        'service': 'dataclysm',
        'sessions': len(sessions),
        'endpoints': [
            'POST /upload',
            'GET /sessions/<id>',
            'POST /sessions/<id>/actions/<action_id>',
            'POST /sessions/<id>/apply-all',
            'POST /sessions/<id>/validate',
            'POST /sessions/<id>/repair',
            'GET /sessions/<id>/export',
            'GET /sessions/<id>/diff',
            'GET /sessions/<id>/chart',
            'POST /sessions/<id>/chat',
            'DELETE /sessions/<id>',
        ],
    })


@app.errorhandler(413)
def request_entity_too_large(error):
    return jsonify({'error': 'File size too large. Upload must be less than 50MB.'}), 413


@app.route('/upload', methods=['POST'])
def upload_file():
    """Upload a CSV file, parse it and run the analysis step"""
    if 'file' not in request.files:
        return jsonify({'error': 'No file provided'}), 400

    file = request.files['file']
    if not file or file.filename == '':
        return jsonify({'error': 'No file selected'}), 400
    if not allowed_file(file.filename):
        return jsonify({'error': 'Only .csv or .txt files are accepted'}), 400

    try:
        text = file.read().decode('utf-8-sig')
    except UnicodeDecodeError:
        return jsonify({'error': 'File is not valid UTF-8 text'}), 400

    session_id = f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"
    session = CleaningSession(config=SessionConfig(), llm=app.config.get('LLM_CALL'))
    store_session(session_id, session)

    if not session.load(text, secure_filename(file.filename)):
        payload = session_payload(session_id, session, include_rows=False)
        payload['error'] = 'Failed to analyze dataset.'
        return jsonify(payload), 502

    return jsonify(session_payload(session_id, session))


@app.route('/sessions/<session_id>')
def get_status(session_id):
    session = get_session(session_id)
    if session is None:
        return jsonify({'error': 'Session not found'}), 404
    include_rows = request.args.get('rows', '1') != '0'
    return jsonify(session_payload(session_id, session, include_rows=include_rows))


@app.route('/sessions/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    if sessions.pop(session_id, None) is None:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify({'deleted': session_id})


@app.route('/sessions/<session_id>/actions/<action_id>', methods=['POST'])
def execute_action(session_id, action_id):
    session = get_session(session_id)
    if session is None or session.analysis is None:
        return jsonify({'error': 'Session not found'}), 404

    try:
        ok = session.execute_action(action_id)
    except KeyError:
        return jsonify({'error': f'Unknown action: {action_id}'}), 404

    payload = session_payload(session_id, session)
    if not ok:
        payload['error'] = 'Cleaning action failed; data left unchanged.'
        return jsonify(payload), 502
    return jsonify(payload)


@app.route('/sessions/<session_id>/apply-all', methods=['POST'])
def apply_all(session_id):
    session = get_session(session_id)
    if session is None or session.analysis is None:
        return jsonify({'error': 'Session not found'}), 404

    ok = session.apply_all()
    payload = session_payload(session_id, session)
    if not ok:
        payload['error'] = 'Bulk clean failed; data left unchanged.'
        return jsonify(payload), 502
    return jsonify(payload)


@app.route('/sessions/<session_id>/validate', methods=['POST'])
def validate(session_id):
    session = get_session(session_id)
    if session is None or session.analysis is None:
        return jsonify({'error': 'Session not found'}), 404
    result = session.validate()
    return jsonify(result.to_dict())


@app.route('/sessions/<session_id>/repair', methods=['POST'])
def repair(session_id):
    session = get_session(session_id)
    if session is None or session.analysis is None:
        return jsonify({'error': 'Session not found'}), 404
    if session.validation is None or not session.validation.errors:
        return jsonify({'error': 'Nothing to repair; run validation first'}), 400

    ok = session.auto_repair()
    payload = session_payload(session_id, session)
    if not ok:
        payload['error'] = 'Repair failed; data left unchanged.'
        return jsonify(payload), 502
    return jsonify(payload)


@app.route('/sessions/<session_id>/export')
def download_result(session_id):
    session = get_session(session_id)
    if session is None or session.analysis is None:
        return jsonify({'error': 'Result not available'}), 404

    filename, text = session.export()
    return send_file(
        io.BytesIO(text.encode('utf-8')),
        mimetype='text/csv',
        as_attachment=True,
        download_name=filename or EXPORT_FILENAME,
    )


@app.route('/sessions/<session_id>/diff')
def diff(session_id):
    session = get_session(session_id)
    if session is None:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify([c.to_dict() for c in session.diff()])


@app.route('/sessions/<session_id>/chart')
def chart(session_id):
    session = get_session(session_id)
    if session is None:
        return jsonify({'error': 'Session not found'}), 404

    aggregation = request.args.get('agg', 'sum')
    if aggregation not in AGGREGATIONS:
        return jsonify({'error': f'Unknown aggregation: {aggregation}'}), 400

    points = session.chart(
        request.args.get('x', ''),
        request.args.get('y', ''),
        aggregation,
        use_raw=request.args.get('view') == 'raw',
    )
    return jsonify(points)


@app.route('/sessions/<session_id>/chat', methods=['POST'])
def chat(session_id):
    session = get_session(session_id)
    if session is None:
        return jsonify({'error': 'Session not found'}), 404

    data = request.get_json(silent=True) or {}
    message = str(data.get('message', '')).strip()
    if not message:
        return jsonify({'error': 'Empty message'}), 400

    return jsonify({'reply': session.chat(message)})


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=3000)
