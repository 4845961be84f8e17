import os
import sys

# Ensure the src directory is on sys.path so tests can import the package uninstalled
SRC_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)
