"""TwiML rendering for the telephony callback."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ..config import TelephonyConfig


def render_twiml(answer_text: str, config: TelephonyConfig) -> str:
    """Build a <Response> that speaks the answer and listens for the next question.

    Args:
        answer_text: Text to synthesize.
        config: Voice, language, reprompt and callback path.

    Returns:
        XML document as a string, with declaration.
    """
    response = ET.Element("Response")
    say = ET.SubElement(
        response, "Say", voice=config.voice, language=config.language
    )
    say.text = answer_text

    gather = ET.SubElement(
        response,
        "Gather",
        input="speech",
        action=config.action_path,
        method="POST",
        language=config.language,
        speechTimeout="auto",
    )
    reprompt = ET.SubElement(
        gather, "Say", voice=config.voice, language=config.language
    )
    reprompt.text = config.reprompt

    # Caller stayed silent: loop back rather than hang up.
    redirect = ET.SubElement(response, "Redirect", method="POST")
    redirect.text = config.action_path

    body = ET.tostring(response, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'
