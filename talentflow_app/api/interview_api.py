"""
Public assessment API used by candidates through invitation links.
"""
from flask import Blueprint, request, jsonify
from talentflow_app.services.assessment import start_interview, submit_interview

bp = Blueprint('interview_api', __name__, url_prefix='/api/interview')


@bp.route('/start', methods=['POST'])
def start():
    """Open the assessment behind an invitation token. Payload: { token }."""
    data = request.json or {}
    token = (data.get('token') or '').strip()
    if not token:
        return jsonify({'error': 'Interview token is required'}), 400

    return jsonify(start_interview(token))


@bp.route('/submit', methods=['POST'])
def submit():
    """Score an assessment. Payload: { responseId, answers, timeTaken, recordingUrl }."""
    data = request.json or {}
    response_id = data.get('responseId')
    answers = data.get('answers')
    if not response_id or answers is None:
        return jsonify({'error': 'responseId and answers are required'}), 400

    time_taken = data.get('timeTaken')
    if time_taken is not None:
        try:
            time_taken = int(time_taken)
        except (TypeError, ValueError):
            return jsonify({'error': 'timeTaken must be a number of seconds'}), 400

    result = submit_interview(
        response_id,
        answers,
        time_taken=time_taken,
        recording_url=data.get('recordingUrl'),
    )
    return jsonify(result)
