"""Gradio browser UI for the Coloring Page Creator.

Import :func:`coloringpage.ui.app.create_ui` or run the ``coloringpage``
console script.  The package itself imports nothing so that the REST API can
reuse :mod:`coloringpage.ui.validation` without loading Gradio.
"""
