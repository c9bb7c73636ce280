from persona_quill.platforms.specs import PLATFORMS, get_platform

__all__ = ["PLATFORMS", "get_platform"]
