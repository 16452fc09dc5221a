"""
Email sending services using Resend API.
"""
import logging
import requests
from flask import current_app
from talentflow_app.utils.constants import STAGE_FORMATS, DEFAULT_STAGE_FORMAT

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


def send_email(to_email, subject, html_content):
    """Send one HTML email. Never raises; returns {'success': bool, ...}."""
    resend_api_key = current_app.config.get('RESEND_API_KEY')
    if not resend_api_key:
        return {'success': False, 'error': 'Resend API key not configured'}

    if not to_email:
        return {'success': False, 'error': 'Recipient email not available'}

    try:
        response = requests.post(
            RESEND_URL,
            headers={
                "Authorization": f"Bearer {resend_api_key}",
                "Content-Type": "application/json"
            },
            json={
                "from": current_app.config.get('EMAIL_FROM'),
                "to": [to_email],
                "subject": subject,
                "html": html_content
            },
            timeout=30
        )

        if response.status_code == 200:
            return {'success': True, 'message_id': response.json().get('id')}
        logger.warning(f"Resend rejected email to {to_email}: {response.status_code} {response.text[:300]}")
        return {'success': False, 'error': response.text}

    except (requests.RequestException, ValueError) as e:
        logger.error(f"Email send failed for {to_email}: {e}")
        return {'success': False, 'error': str(e)}


def _wrap(title, body_html, company_name):
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #4f46e5;">{title}</h2>

        {body_html}

        <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">

        <p style="color: #999; font-size: 12px;">This email was sent by TalentFlow on behalf of {company_name}.</p>
    </div>
    """


def send_stage_transition_email(candidate, job_posting, stage_name, passed, score=None,
                                feedback=None, next_stage_name=None):
    """Tell the candidate the outcome of a stage."""
    company = job_posting.display_company_name

    if passed and next_stage_name:
        subject = f"Update on your application - {job_posting.title} at {company}"
        outcome = (
            f"<p>Congratulations! You have cleared the <strong>{stage_name}</strong> stage "
            f"and moved on to <strong>{next_stage_name}</strong>.</p>"
        )
    elif passed:
        subject = f"Congratulations - {job_posting.title} at {company}"
        outcome = (
            f"<p>Congratulations! You have successfully completed every interview stage "
            f"for the <strong>{job_posting.title}</strong> position. The hiring team will be in touch.</p>"
        )
    else:
        subject = f"Application update - {job_posting.title} at {company}"
        outcome = (
            f"<p>Thank you for taking part in the <strong>{stage_name}</strong> stage. "
            f"After careful consideration we will not be moving forward with your application at this time.</p>"
        )

    details = ""
    if score is not None:
        details += f"<p><strong>Stage score:</strong> {score}%</p>"
    if feedback:
        details += f"<p style=\"color: #666; font-size: 14px;\">{feedback}</p>"

    body = f"""
        <p>Hi {candidate.first_name},</p>
        {outcome}
        {details}
        <p>Best regards,<br>The {company} Hiring Team</p>
    """
    return send_email(candidate.email, subject, _wrap('Application Update', body, company))


def send_interview_invitation_email(candidate, job_posting, stage_name, interview_link, expires_at,
                                    scheduled_at=None, meeting_link=None):
    """Invite the candidate to a stage: an assessment link or a live meeting."""
    company = job_posting.display_company_name
    stage_format = STAGE_FORMATS.get(stage_name, DEFAULT_STAGE_FORMAT)
    expires_text = expires_at.strftime('%A, %d %B %Y %H:%M UTC') if expires_at else ''

    schedule_html = ""
    if scheduled_at:
        schedule_html = f"<p><strong>Scheduled for:</strong> {scheduled_at.strftime('%A, %d %B %Y %H:%M UTC')}</p>"

    if meeting_link:
        action_url = meeting_link
        action_label = "Join Interview"
    else:
        action_url = interview_link
        action_label = "Start Interview"

    subject = f"Interview Invitation: {stage_name} - {job_posting.title} at {company}"
    body = f"""
        <p>Hi {candidate.first_name},</p>

        <p>You are invited to the <strong>{stage_name}</strong> round for the
        <strong>{job_posting.title}</strong> position at <strong>{company}</strong>.</p>

        <p><strong>Format:</strong> {stage_format['format']}<br>
        <strong>Duration:</strong> {stage_format['duration']}<br>
        {stage_format['description']}</p>
        {schedule_html}

        <p style="text-align: center; margin: 30px 0;">
            <a href="{action_url}" style="background-color: #4f46e5; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; font-weight: bold;">{action_label}</a>
        </p>

        <p style="color: #666; font-size: 14px;">This link is unique to you and expires on {expires_text}.</p>

        <p>Best of luck!<br>The {company} Hiring Team</p>
    """
    return send_email(candidate.email, subject, _wrap('Interview Invitation', body, company))


def send_assessment_completed_email(employer, candidate, job_posting, stage_name, score, passed):
    """Notify the employer that a candidate finished an assessment."""
    if employer is None:
        return {'success': False, 'error': 'Employer not available'}

    company = job_posting.display_company_name
    result = 'Passed' if passed else 'Needs review'
    subject = f"{candidate.full_name} completed {stage_name} ({score}%)"
    body = f"""
        <p>Hi {employer.first_name},</p>

        <p><strong>{candidate.full_name}</strong> has completed the <strong>{stage_name}</strong>
        assessment for <strong>{job_posting.title}</strong>.</p>

        <p><strong>Score:</strong> {score}%<br>
        <strong>Result:</strong> {result}</p>

        <p style="color: #666; font-size: 14px;">Open the interview pipeline to review the details.</p>
    """
    return send_email(employer.email, subject, _wrap('Assessment Completed', body, company))
