"""Sphinx configuration."""
import yamldump

project = "yamldump"
author = yamldump.__author__
copyright = yamldump.__copyright__
release = version = yamldump.__version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.doctest",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
]

autodoc_typehints = "none"
autodoc_member_order = "bysource"

intersphinx_mapping = {"python": ("https://docs.python.org/3", None)}
