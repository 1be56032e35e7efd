# Reporting side channel for the simulator
# This module provides:
# - narrator.py: console narration of battles and run summaries
# - logger.py: JSONL run logging

__version__ = "0.1.0"
