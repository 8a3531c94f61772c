# fhir_templates.py
# Prompt pieces for the three FHIR resources a conversation can be summarized into.
# https://build.fhir.org/condition.html
# https://build.fhir.org/questionnaire.html#resource
# https://build.fhir.org/questionnaireresponse.html#resource
from enum import Enum
from typing import Any, Dict, NamedTuple


class SummaryKind(str, Enum):
    CONDITION = "condition"
    QUESTIONNAIRE = "questionnaire"
    QUESTIONNAIRE_RESPONSE = "questionnaire-response"


class SummaryTemplate(NamedTuple):
    resource_type: str
    instruction: str
    guidance: str
    skeleton: Dict[str, Any]
    notes: str


CONDITION_SKELETON = {
    "resourceType": "Condition",
    "code": {
        "coding": [
            {
                "system": "http://snomed.info/sct",
                "code": "SNOMED_CT_CODE",
                "display": "SYMPTOM_NAME"
            }
        ],
        "text": "SYMPTOM_NAME"
    },
    "subject": {"reference": "Patient/PATIENT_ID"},
    "severity": {
        "coding": [
            {
                "system": "http://snomed.info/sct",
                "code": "SEVERITY_CODE",
                "display": "SEVERITY"
            }
        ],
        "text": "SEVERITY"
    },
    "onsetDateTime": "ONSET_DATETIME"
}

QUESTIONNAIRE_SKELETON = {
    "resourceType": "Questionnaire",
    "id": "symptom-questionnaire",
    "title": "Symptom Questionnaire",
    "status": "draft",
    "item": [
        {
            "linkId": "1",
            "text": "QUESTION_TEXT",
            "type": "QUESTION_TYPE",
            "required": True
        }
    ]
}

QUESTIONNAIRE_RESPONSE_SKELETON = {
    "resourceType": "QuestionnaireResponse",
    "id": "symptom-questionnaire-response",
    "questionnaire": "Questionnaire/symptom-questionnaire",
    "status": "completed",
    "item": [
        {
            "linkId": "1",
            "text": "QUESTION_TEXT",
            "answer": [{"valueString": "USER_ANSWER"}]
        }
    ]
}

TEMPLATES = {
    SummaryKind.CONDITION: SummaryTemplate(
        resource_type="Condition",
        instruction=(
            "Please extract the relevant symptom information from the following "
            "conversation and map it to FHIR data structures:"
        ),
        guidance="",
        skeleton=CONDITION_SKELETON,
        notes=(
            "Replace SYMPTOM_NAME, SEVERITY and ONSET_DATETIME with values from the "
            "conversation and use the matching SNOMED CT codes where you know them."
        ),
    ),
    SummaryKind.QUESTIONNAIRE: SummaryTemplate(
        resource_type="Questionnaire",
        instruction="Please create a FHIR Questionnaire resource based on the following conversation:",
        guidance=(
            "The Questionnaire should capture the relevant symptom information discussed in the "
            "conversation. Each question should correspond to a specific symptom-related detail, "
            "such as the symptom description, severity, duration, associated symptoms, and "
            "aggravating factors."
        ),
        skeleton=QUESTIONNAIRE_SKELETON,
        notes=(
            "Add one item per question. Replace QUESTION_TEXT with the actual question text and "
            'QUESTION_TYPE with the appropriate question type (e.g., "string", "choice", "boolean").'
        ),
    ),
    SummaryKind.QUESTIONNAIRE_RESPONSE: SummaryTemplate(
        resource_type="QuestionnaireResponse",
        instruction="Please create a FHIR QuestionnaireResponse resource based on the following conversation:",
        guidance=(
            "The QuestionnaireResponse should capture the questions asked by the chatbot and the "
            "corresponding answers provided by the user. Each item in the QuestionnaireResponse "
            "should represent a question-answer pair."
        ),
        skeleton=QUESTIONNAIRE_RESPONSE_SKELETON,
        notes=(
            "Add one item per question-answer pair. Replace QUESTION_TEXT with the actual question "
            "text and USER_ANSWER with the user's corresponding answer."
        ),
    ),
}


def get_template(kind):
    return TEMPLATES[SummaryKind(kind)]
