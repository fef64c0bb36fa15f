"""Slam domain services: room lifecycle, round advancement and scoring.

Routes and socket handlers import from here; nothing in this package knows
about HTTP. Services raise ``slam_app.errors`` exceptions and publish
notifications only after their transaction has committed.
"""
