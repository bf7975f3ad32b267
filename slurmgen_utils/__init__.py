from .image_collaborator import ImageCollaborator, TiffImageCollaborator

__all__ = ["ImageCollaborator", "TiffImageCollaborator"]
