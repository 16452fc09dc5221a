"""
Client for the AI gateway (OpenAI-compatible chat completions with tool calling).
"""
import json
import logging
import requests
from flask import current_app
from talentflow_app.utils.errors import AIGatewayError

logger = logging.getLogger(__name__)


def call_ai_function(system_prompt, user_prompt, function_name, description, parameters):
    """
    Force the model to call `function_name` and return its parsed arguments.

    Raises AIGatewayError on rate limiting (429), exhausted credits (402),
    transport failures and responses without a usable tool call.
    """
    api_key = current_app.config.get('AI_GATEWAY_API_KEY')
    if not api_key:
        raise AIGatewayError('AI gateway API key not configured')

    payload = {
        "model": current_app.config.get('AI_MODEL'),
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "tools": [{
            "type": "function",
            "function": {
                "name": function_name,
                "description": description,
                "parameters": parameters,
            },
        }],
        "tool_choice": {"type": "function", "function": {"name": function_name}},
    }

    try:
        response = requests.post(
            current_app.config.get('AI_GATEWAY_URL'),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=current_app.config.get('AI_REQUEST_TIMEOUT', 60),
        )
    except requests.RequestException as e:
        logger.error(f"AI gateway request failed: {e}")
        raise AIGatewayError('AI gateway request failed') from e

    if response.status_code == 429:
        raise AIGatewayError('Rate limit exceeded', status_code=429)
    if response.status_code == 402:
        raise AIGatewayError('AI credits exhausted', status_code=402)
    if response.status_code != 200:
        logger.error(f"AI gateway error {response.status_code}: {response.text[:500]}")
        raise AIGatewayError('AI evaluation failed')

    try:
        data = response.json()
        tool_call = data['choices'][0]['message']['tool_calls'][0]
        arguments = tool_call['function']['arguments']
        if isinstance(arguments, str):
            arguments = json.loads(arguments)
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.error(f"Malformed AI gateway response: {e}")
        raise AIGatewayError('No tool call in AI response') from e

    if not isinstance(arguments, dict):
        raise AIGatewayError('No tool call in AI response')
    return arguments
