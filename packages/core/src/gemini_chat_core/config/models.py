"""
Model and endpoint defaults.
"""

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_GEMINI_API_HOST = "generativelanguage.googleapis.com"
DEFAULT_GEMINI_API_VERSION = "v1beta"
DEFAULT_VOICE_NAME = "Leda"
