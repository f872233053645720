"""
Exceptions raised while generating images.
"""


class ImageGenerationError(Exception):
    """Base exception for image generation failures."""
    pass


class ProviderCallError(ImageGenerationError):
    """The provider call itself failed (network, auth, quota, bad request)."""
    pass


class NoImageDataError(ImageGenerationError):
    """The provider answered but returned no usable image part."""
    pass


class CredentialError(ProviderCallError):
    """The API key is missing, invalid or expired."""
    pass
