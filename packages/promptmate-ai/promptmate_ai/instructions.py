"""Tone and type instruction tables used to build the rewrite prompt"""
from types import MappingProxyType
from typing import Mapping

DEFAULT_TONE = "professional"
DEFAULT_TYPE = "other"

TONE_INSTRUCTIONS: Mapping[str, str] = MappingProxyType({
    "formal": "Use formal, professional language with proper structure and respectful tone. Avoid contractions and casual expressions.",
    "casual": "Use relaxed, conversational language that feels natural and approachable. Contractions are fine.",
    "friendly": "Use warm, welcoming language that creates connection. Be personable and engaging.",
    "professional": "Use clear, business-appropriate language that is polished but not overly formal.",
    "creative": "Use imaginative, engaging language with vivid descriptions and creative expressions.",
    "concise": "Use brief, direct language that gets to the point quickly while maintaining clarity.",
})

TYPE_INSTRUCTIONS: Mapping[str, str] = MappingProxyType({
    "email": "Structure as a proper email with clear subject line suggestions and appropriate formatting.",
    "message": "Format as a clear, direct message suitable for instant messaging or brief communication.",
    "explanation": "Provide clear, logical explanation with good flow and easy-to-understand language.",
    "summary": "Create a concise summary that captures the key points effectively.",
    "proposal": "Structure as a professional proposal with clear objectives and compelling arguments.",
    "report": "Format as a structured report with clear sections and professional presentation.",
    "other": "Improve clarity, structure, and overall effectiveness of the content.",
})

SYSTEM_PROMPT_TEMPLATE = """You are PromptMate, an AI assistant that specializes in rewriting and improving text.

Your task is to rewrite the given text according to these specifications:
- TONE: {tone_instruction}
- TYPE: {type_instruction}

Rules:
1. Maintain the original meaning and intent
2. Improve clarity, structure, and flow
3. Fix any grammar or spelling issues
4. Make it more engaging and effective
5. Keep it concise but comprehensive
6. Don't add information that wasn't in the original

Please rewrite the following text:"""


def build_system_prompt(tone: str, prompt_type: str) -> str:
    """System instruction for a tone/type pair; unknown keys use the defaults"""
    return SYSTEM_PROMPT_TEMPLATE.format(
        tone_instruction=TONE_INSTRUCTIONS.get(tone, TONE_INSTRUCTIONS[DEFAULT_TONE]),
        type_instruction=TYPE_INSTRUCTIONS.get(prompt_type, TYPE_INSTRUCTIONS[DEFAULT_TYPE]),
    )


def build_rewrite_request(original_prompt: str, tone: str, prompt_type: str) -> str:
    """Full text sent to the model for one rewrite"""
    return f'{build_system_prompt(tone, prompt_type)}\n\n"{original_prompt}"'
