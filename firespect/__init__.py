"""Firespect - voice-driven fire protection inspection assistant.

Turns inspector transcripts into structured riser readings, evaluates them
against NFPA 25 thresholds, and schedules technician jobs.
"""

__version__ = "0.3.0"
