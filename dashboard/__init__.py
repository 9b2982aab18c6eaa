"""Dashboard package namespace.

This package contains the Streamlit donor dashboard and its UI components.
Components keep their branching logic in small ``*_view`` / layout helpers
that return plain values, and draw with a ``render_*`` function.
"""
