"""
Services used by the setup wizard controller
"""
