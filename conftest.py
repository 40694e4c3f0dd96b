"""Put the project root on the import path so tests run without installing cyclecast."""
import os
import sys

project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)
