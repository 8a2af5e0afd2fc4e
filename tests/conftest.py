import os
import sys

# Add src to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))
