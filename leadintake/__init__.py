"""
leadintake: parse forwarded sales-inquiry emails into lead/company rows.

Typical use:

    from leadintake.pipeline import build_coordinator

    coordinator = build_coordinator()
    result = coordinator.process(raw_email)
"""

__version__ = "0.3.0"
