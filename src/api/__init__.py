"""
Gateway payload layer for the Action Wizard.

schemas.py holds the pydantic request/response models exchanged with the
business API through src.services.gateway.
"""
