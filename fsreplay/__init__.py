# python
"""fsreplay package"""
__version__ = "0.1"

from fsreplay.env import load_env

# Load .env values at import time so config lookups see them through os.environ.
load_env()
