from persona_quill.analyzers.style_extractor import StyleExtractor, extract
from persona_quill.analyzers.profile import ProfileBuilder

__all__ = ["ProfileBuilder", "StyleExtractor", "extract"]
