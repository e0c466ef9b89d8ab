"""displaysync - reconcile desired text-and-graphic state with a remote display surface."""

__version__ = "1.0.0"
__author__ = "DisplaySync Team"
__email__ = "support@displaysync.local"
__description__ = "Text and graphic display reconciliation for capability-limited surfaces"

# Package metadata
__all__ = [
    "__author__",
    "__description__",
    "__email__",
    "__version__",
]
