from coinchart.platforms.ai_providers.google import GoogleAIClient, UNEXPECTED_RESPONSE_SHAPE

__all__ = [
    'GoogleAIClient',
    'UNEXPECTED_RESPONSE_SHAPE',
]
