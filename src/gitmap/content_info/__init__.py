"""
Side-channel content-info document.

Provides a loader for the optional JSON document that supplies extra
per-file dates. See :mod:`gitmap.content_info.loader` for details.
"""

from .loader import ContentInfoError, default_content_info_path, load_content_info  # noqa: F401
