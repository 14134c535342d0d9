# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# add project root to sys.path for autodoc
import os
import sys

sys.path.insert(0, os.path.abspath('../..'))
# -- Project information -----------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#project-information

project = 'TimeSheet'
copyright = '2025, UIH/HRS'
author = 'UIH/HRS'
release = '0.1.0'

# -- General configuration ---------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#general-configuration

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.autosectionlabel',
    'sphinx_markdown_builder'
]

napoleon_google_docstring = True
napoleon_use_param = False
napoleon_use_ivar = False

templates_path = ['_templates']
exclude_patterns = []

autodoc_mock_imports = ['PySide6', 'googleapiclient', 'google', 'google_auth_oauthlib']

autodoc_default_options = {
    'member-order': 'groupwise',
    'show-inheritance': True,
}
autodoc_preserve_defaults = True

# -- Options for HTML output -------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#options-for-html-output

html_theme = 'furo'
html_theme_options = {
    "light_css_variables": {
        "color-brand-primary": "rgba(25, 118, 210, 1)",
        "color-brand-content": "rgba(25, 118, 210, 1)",
    },
    "dark_css_variables": {
        "color-brand-primary": "rgba(88, 138, 180, 1)",
        "color-brand-content": "rgba(88, 138, 180, 1)",
    },
    "navigation_with_keys": True,
}
highlight_language = "python"
