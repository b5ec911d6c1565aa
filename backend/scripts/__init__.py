"""
Backend Scripts Module

Utility scripts for database setup and maintenance.

Available scripts:
    - seed_data.py: Creates demo subjects at every lifecycle status
    - check_areas.py: Validates an area registry file

Usage:
    python -m scripts.seed_data
    python -m scripts.check_areas path/to/areas.json
"""
