"""
Prompt2App

Turns a natural-language description into a single self-contained
HTML/CSS/JavaScript document using a hosted Large Language Model.
"""

__version__ = "0.1.0"
