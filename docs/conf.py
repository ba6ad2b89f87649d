"""Sphinx configuration for infinitevector documentation."""

from importlib.metadata import version as get_version

# -- Project information -----------------------------------------------------
project = 'infinitevector'
author = 'infinitevector contributors'
copyright = f'2026, {author}'
release = get_version('infinitevector')
version = '.'.join(release.split('.')[:2])

# -- General configuration ---------------------------------------------------
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx.ext.doctest',
]

exclude_patterns = ['_build']

# Google-style docstrings only
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_use_rtype = False

# -- Options for HTML output -------------------------------------------------
html_theme = 'sphinx_rtd_theme'
html_title = f'infinitevector {release}'

# -- Intersphinx configuration -----------------------------------------------
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
}

# -- Autodoc configuration ---------------------------------------------------
autodoc_typehints = 'description'
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'special-members': '__init__, __eq__, __getitem__, __setitem__, __next__',
    'exclude-members': '__weakref__, __hash__',
}
