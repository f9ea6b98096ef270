from cv_intake.services.field_inference import FieldInferenceEngine
from cv_intake.services.text_extractor import UnsupportedFormatError, extract_text

__all__ = ["FieldInferenceEngine", "UnsupportedFormatError", "extract_text"]
