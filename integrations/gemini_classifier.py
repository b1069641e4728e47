"""
Flood photo triage through Gemini.

The model is asked for a JSON object (depth, risk, objectsDetected,
vulnerablePeople, advice). Any failure (no key, network, quota, bad JSON,
unknown risk label) degrades to a cautious Low-risk fallback so a citizen's
submission is never blocked.
"""

import json
import logging
from typing import Optional

from google import genai
from google.genai import types

from floodguard_config import FALLBACK_ANALYSIS, GEMINI_MODEL, get_gemini_key
from risk_engine.models import AnalysisResult

logger = logging.getLogger(__name__)

FLOOD_ANALYSIS_PROMPT = """
Analyze this image for flood conditions in Vietnam for a rescue application.

1. Water Analysis: Estimate depth (e.g., "0.5m"), risk level (High/Medium/Low).
2. Object Detection: Identify standard objects (House, Motorbike).
3. CRITICAL - Vulnerable People Detection: Look specifically for 'Elderly' (Người già), 'Children/Baby' (Trẻ em), 'Pregnant' (Phụ nữ mang thai), or 'Disabled' (Người khuyết tật). List them in the 'vulnerablePeople' field.
4. Advice: Provide brief, urgent safety advice in Vietnamese.

Rules:
- Risk 'High': Depth > 1m, fast current, or presence of vulnerable people in water.
- Risk 'Medium': Depth 0.3m - 1m.
"""

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "depth": {"type": "STRING", "description": "Estimated water depth"},
        "risk": {"type": "STRING", "enum": ["High", "Medium", "Low"], "description": "Risk level"},
        "objectsDetected": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "General objects seen",
        },
        "vulnerablePeople": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Specific list of vulnerable groups found (e.g., Elderly, Child)",
        },
        "advice": {"type": "STRING", "description": "Safety advice in Vietnamese"},
    },
    "required": ["depth", "risk", "objectsDetected", "vulnerablePeople", "advice"],
}


def fallback_analysis() -> AnalysisResult:
    return AnalysisResult.from_dict(FALLBACK_ANALYSIS)


class GeminiFloodClassifier:
    def __init__(self, client=None, model: str = GEMINI_MODEL):
        self.model = model
        self.client = client
        if self.client is None:
            api_key = get_gemini_key()
            if not api_key:
                logger.warning("GEMINI_API_KEY not found in environment variables! Photo triage will use the fallback result.")
            else:
                try:
                    self.client = genai.Client(api_key=api_key)
                    logger.info("Gemini client initialized successfully.")
                except Exception as e:
                    logger.error(f"Error initializing Gemini client: {e}")

    @property
    def available(self) -> bool:
        return self.client is not None

    def classify(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> AnalysisResult:
        if not self.client:
            return fallback_analysis()

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    FLOOD_ANALYSIS_PROMPT,
                ],
                config={
                    "response_mime_type": "application/json",
                    "response_schema": RESPONSE_SCHEMA,
                },
            )
            return parse_analysis(response.text)
        except Exception as e:
            logger.error(f"Gemini Analysis Failed: {e}")
            return fallback_analysis()


def parse_analysis(text: Optional[str]) -> AnalysisResult:
    if not text:
        raise ValueError("No response from AI")
    return AnalysisResult.from_dict(json.loads(text))
