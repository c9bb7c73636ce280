from persona_quill.prompts.synthesizer import PromptSynthesizer, synthesize, temperature_for

__all__ = ["PromptSynthesizer", "synthesize", "temperature_for"]
