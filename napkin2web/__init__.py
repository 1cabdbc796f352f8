"""
Napkin2Web: Sketch-to-Code Generation with Iterative Refinement

Turns a hand-drawn UI sketch into static HTML, React, or Next.js code using a
hosted vision model, and keeps a static HTML preview in sync as the code is
refined with natural-language instructions.
"""

__version__ = "0.1.0"
