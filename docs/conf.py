#!/usr/bin/env python3
import sys
import os
import os.path as path
import datetime


### -- General options -- ###

# Make autodoc and import work.
if path.exists(path.join('..', 'tmilib')):
    sys.path.insert(0, os.path.abspath('..'))
import tmilib

# General information about the project.
project = tmilib.__name__
copyright = '{current}, tmilib authors'.format(current=datetime.date.today().year)
version = release = tmilib.__version__

# Sphinx extensions to use.
extensions = [
    # Generate API description from code.
    'sphinx.ext.autodoc',
    # Link to Sphinx documentation for related projects.
    'sphinx.ext.intersphinx',
    # Include full source code with documentation.
    'sphinx.ext.viewcode'
]

# Documentation links for projects we link to.
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None)
}


### -- Build locations -- ###

templates_path = ['_templates']
exclude_patterns = ['_build']
source_suffix = '.rst'
master_doc = 'index'


### -- HTML output -- ##

# Only set RTD theme if we're building locally.
if os.environ.get('READTHEDOCS', None) != 'True':
    import sphinx_rtd_theme
    html_theme = "sphinx_rtd_theme"
html_show_sphinx = False
htmlhelp_basename = 'tmilibdoc'


### -- Sphinx customization code -- ##

def skip(app, what, name, obj, skip, options):
    if skip:
        return True
    if name.startswith('_') and name != '__init__':
        return True
    if name.startswith('on_data'):
        return True
    if name.startswith('on_raw'):
        return True
    return False

def setup(app):
    app.connect('autodoc-skip-member', skip)
