"""
Exception classes for the caption service.
"""
from typing import Optional, Dict, Any

class CaptionError(Exception):
    """Base exception class for caption rendering errors"""
    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to standard error format"""
        return {
            "code": self.code,
            "message": str(self),
            "details": self.details
        }

class ImageNotFoundError(CaptionError):
    """Raised when the requested base image has no file"""
    def __init__(self, filename: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Image not found: {filename}", code="IMAGE_NOT_FOUND", details=details)
        self.filename = filename

class CompositeError(CaptionError):
    """Raised when flattening or encoding the captioned image fails"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="COMPOSITE_FAILED", details=details)

class FontUnavailableError(CaptionError):
    """Raised when a font cannot be loaded or a string cannot be shaped"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="FONT_UNAVAILABLE", details=details)
