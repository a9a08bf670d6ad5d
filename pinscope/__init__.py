"""
pinscope - Pinterest image search over a headless browser.
"""
__version__ = "1.0.2"
