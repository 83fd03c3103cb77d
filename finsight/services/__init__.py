"""
Services Package

Storage backends and backup/restore of the dashboard state.
"""
