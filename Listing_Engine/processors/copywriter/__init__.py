"""
Copywriter — Generation Orchestrator.

    generate_all()        -> header / description / features (/ reviews), one AI call
    regenerate_section()  -> one section, one AI call (photo: no call)
    translate_section()   -> one section's text, one AI call
"""
from .generator import generate_all, regenerate_section, translate_section

__all__ = ["generate_all", "regenerate_section", "translate_section"]
