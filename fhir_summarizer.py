# fhir_summarizer.py
import json
import logging

from conversation import render_transcript
from fhir_templates import get_template
from response_parser import parse_model_json

logger = logging.getLogger(__name__)


def build_summary_prompt(turns, kind):
    template = get_template(kind)
    parts = [template.instruction, render_transcript(turns)]
    if template.guidance:
        parts.append(template.guidance)
    parts.append(f"Use the following format for the {template.resource_type} resource:")
    parts.append(json.dumps(template.skeleton, indent=2))
    parts.append(template.notes)
    parts.append("Return only the JSON resource.")
    return "\n\n".join(parts)


def summarize(transport, turns, kind):
    """Ask the model to reformat `turns` as a FHIR resource of `kind`.

    Raises TransportError if the request fails and ParseError if the reply
    does not unwrap to JSON.
    """
    prompt = build_summary_prompt(turns, kind)
    raw = transport.generate(prompt)
    logger.debug("summary reply (%s): %s", kind, raw)
    document = parse_model_json(raw)
    logger.info("summarized %d turns into %s", len(turns), get_template(kind).resource_type)
    return document
