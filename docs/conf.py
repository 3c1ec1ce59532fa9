# Sphinx configuration for the Proposal Copilot docs.

import os
import sys

sys.path.insert(0, os.path.abspath('../src'))

from proposal_copilot import __version__  # noqa: E402

project = 'Proposal Copilot'
copyright = '2026, Proposal Copilot contributors'
author = 'Proposal Copilot contributors'
version = release = __version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

exclude_patterns = ['_build']

html_theme = 'sphinx_rtd_theme'
html_title = f'Proposal Copilot {release}'

# Pydantic models carry generated members that add noise to every class page.
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'exclude-members': 'model_config,model_fields,model_computed_fields',
}
autodoc_typehints = 'description'
autoclass_content = 'class'

napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pydantic': ('https://docs.pydantic.dev/latest', None),
}
