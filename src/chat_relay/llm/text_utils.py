"""
Reply extraction from Gemini generateContent payloads.
"""

from typing import Any, Optional


def extract_reply_text(data: Any) -> Optional[str]:
    """
    Concatenate the text parts of the first candidate.
    
    Payload shape:
    {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": "..."}, ...]}}
        ]
    }
    
    Non-text parts are skipped. The result is trimmed.
    
    Returns:
        Reply text (possibly empty), or None when there is no candidate
    """
    if not isinstance(data, dict):
        return None
    
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        return None
    
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        parts = []
    
    texts = []
    for part in parts:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            texts.append(part["text"])
    return "".join(texts).strip()
