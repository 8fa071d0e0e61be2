"""
SaaS Core — shared infrastructure.

Provides:
    - LLM provider registry (the only place chat models are constructed)
    - AI Gateway (single-shot async call boundary)
"""
